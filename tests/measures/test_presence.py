# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

from pytest import approx

from cfsim.data import UNUSED, RatingVector


def test_amer(sim):
    # 6 known items, 3 rated by each user, 1 in common
    assert sim("amer", 1, 3) == approx(((1 - 4 / 6) + 2 / 6) / 2)


def test_amer_identical(sim):
    assert sim("amer", 1, 2) == approx(1.0)


def test_amer_new_fields(sim):
    # fields outside the dataset still count toward the total
    v1 = RatingVector.from_mapping(10, {100: 3.0})
    v2 = RatingVector.from_mapping(11, {101: 3.0})
    assert sim("amer", v1, v2) == approx(((1 - 2 / 8) + 0) / 2)


def test_amer2(sim):
    # exclusive sums 9 and 7, totals 12 and 8
    assert sim("amer2", 1, 3) == approx(1 - 64 / 96)


def test_qti(sim):
    # common sums 3 and 1
    assert sim("qti", 1, 3) == approx((3 / 96) * (1 - 63 / 96))


def test_qtij(sim):
    jac = 0.2
    assert sim("qtij", 1, 3) == approx((3 * jac / 96) * (1 - 63 * (1 - jac) / 96))


def test_presence_zero_sums(sim):
    zeros = RatingVector.from_mapping(10, {1: 0.0})
    assert sim("amer2", zeros, 1) == UNUSED
    assert sim("qti", zeros, 1) == UNUSED


def test_mmns(sim):
    assert sim("mmns", 1, 2) == approx(3 * 46 / (3 * 12 + 3 * 11))


def test_mmns_disjoint(sim):
    assert sim("mmns", 1, 5) == UNUSED
