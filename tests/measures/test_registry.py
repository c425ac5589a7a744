# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

from pytest import approx, mark, raises

from cfsim.data import UNUSED, RatingVector
from cfsim.measures import lookup_measure, measure, measure_names

ALL_MEASURES = [
    "amer",
    "amer2",
    "amer2j",
    "bc",
    "bcf",
    "bcfj",
    "cjacmd",
    "coco",
    "cod",
    "coj",
    "cosine",
    "cosinej",
    "cpc",
    "feng",
    "jaccard",
    "jaccard2",
    "mmd",
    "mmns",
    "msd",
    "msdj",
    "mu",
    "nhsm",
    "pc",
    "pearson",
    "pearsonj",
    "pip",
    "pss",
    "qti",
    "qtij",
    "smtp",
    "spc",
    "src",
    "ta",
    "taj",
    "tjm",
    "triangle",
    "urp",
    "wpc",
]


def test_all_registered():
    assert measure_names() == sorted(ALL_MEASURES)


def test_lookup_unknown():
    assert lookup_measure("no-such-measure") is None


def test_duplicate_registration():
    with raises(ValueError):

        @measure("cosine")
        def other(ctx, v1, v2, *args):
            return 0.0


def test_flags():
    pc = lookup_measure("pc")
    assert pc is not None
    assert not pc.cacheable
    assert pc.needs_columns

    bc = lookup_measure("bc")
    assert bc is not None
    assert bc.needs_bins
    assert bc.cacheable

    assert lookup_measure("cjacmd") != lookup_measure("mmd")


# measures over the union that stay defined when one side is empty
UNION_DEFINED = {"amer": 0.25, "jaccard": 0.0, "triangle": 0.0, "tjm": 0.0}


@mark.parametrize("name", ALL_MEASURES)
def test_empty_vector(sim, name):
    empty = RatingVector(99, [], [])
    if name in UNION_DEFINED:
        assert sim(name, empty, 1, 1) == approx(UNION_DEFINED[name])
        return

    assert sim(name, empty, 1, 1) == UNUSED
    assert sim(name, 1, empty, 1) == UNUSED


@mark.parametrize("name", ["pearson", "cpc", "msd", "cod", "pc", "src", "ta", "cosine"])
def test_disjoint_unused(sim, name):
    a = RatingVector.from_mapping(10, {1: 5.0})
    b = RatingVector.from_mapping(11, {2: 5.0})
    assert sim(name, a, b, 1) == UNUSED


def test_disjoint_jaccard(sim):
    a = RatingVector.from_mapping(10, {1: 5.0})
    b = RatingVector.from_mapping(11, {2: 5.0})
    assert sim("jaccard", a, b) == 0.0
