# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

import math

from hypothesis import given
from pytest import approx

from cfsim.data import UNUSED, DataConfig, RatingVector, is_used
from cfsim.engine import SimilarityConfig
from cfsim.measures import MeasureContext, lookup_measure
from cfsim.measures.correlation import WPC_THRESHOLD
from cfsim.testing import rating_vector_pairs

PEARSON_12 = 2 / math.sqrt(2 * 42 / 9)


def test_pearson(sim):
    assert sim("pearson", 1, 2) == approx(PEARSON_12)
    assert sim("pearson", 2, 1) == approx(PEARSON_12)


def test_pearson_disjoint(sim):
    assert sim("pearson", 1, 5) == UNUSED


def test_pearson_constant(sim):
    flat = RatingVector.from_mapping(10, {1: 3.0, 2: 3.0})
    assert sim("pearson", flat, 1) == UNUSED


def test_cpc(sim):
    # deviations from the median 3: (2, 0, 1) and (1, -1, 2)
    assert sim("cpc", 1, 2) == approx(4 / math.sqrt(30))


def test_wpc(sim):
    assert sim("wpc", 1, 2) == approx(PEARSON_12 * 3 / WPC_THRESHOLD)


def test_spc(sim):
    assert sim("spc", 1, 2) == approx(PEARSON_12 / (1 + math.exp(-1.5)))


def test_cod(sim):
    # item means are 11/3, 2, and 10/3
    assert sim("cod", 1, 2) == approx(14 / math.sqrt(754))


def test_cod_ignores_unknown_fields(sim):
    v1 = RatingVector.from_mapping(10, {1: 5.0, 100: 2.0})
    v2 = RatingVector.from_mapping(11, {1: 4.0, 100: 5.0})
    w1 = RatingVector.from_mapping(12, {1: 5.0})
    w2 = RatingVector.from_mapping(13, {1: 4.0})
    only_known = sim("cod", w1, w2)
    assert sim("cod", v1, v2) == approx(only_known)


def test_cod_no_known_fields(sim):
    v1 = RatingVector.from_mapping(10, {100: 2.0})
    v2 = RatingVector.from_mapping(11, {100: 5.0})
    assert sim("cod", v1, v2) == UNUSED


@given(rating_vector_pairs())
def test_pearson_symmetric(pair):
    v1, v2 = pair
    ctx = MeasureContext(SimilarityConfig(measure="pearson"), DataConfig())
    pearson = lookup_measure("pearson")
    assert pearson is not None
    s12 = pearson(ctx, v1, v2)
    s21 = pearson(ctx, v2, v1)
    if is_used(s12):
        assert s12 == approx(s21)
        assert -1 - 1e-9 <= s12 <= 1 + 1e-9
    else:
        assert s21 == UNUSED
