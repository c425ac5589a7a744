# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

import math

from hypothesis import given
from pytest import approx

from cfsim.data import UNUSED, DataConfig, RatingVector, is_used
from cfsim.engine import SimilarityConfig
from cfsim.measures import MeasureContext, lookup_measure
from cfsim.testing import rating_vector_pairs

COSINE_12 = 46 / math.sqrt(50 * 45)


def test_cosine(sim):
    assert sim("cosine", 1, 2) == approx(COSINE_12)


def test_cosine_disjoint(sim):
    assert sim("cosine", 1, 5) == UNUSED


def test_cosine_normalized(sim):
    # centered on the median 3: (2, 0, 1) and (1, -1, 2)
    assert sim("cosine", 1, 2, cosine_normalized=True) == approx(4 / math.sqrt(30))
    assert sim("cosine", 1, 2, cos_normalized=True) == approx(4 / math.sqrt(30))


def test_coj_same_support(sim):
    assert sim("coj", 1, 2) == approx(COSINE_12)


def test_coj_partial(sim):
    # users 1 and 3 share only item 2
    assert sim("coj", 1, 3) == approx(3 / math.sqrt(50 * 30))


def test_coj_disjoint(sim):
    assert sim("coj", 1, 5) == approx(0.0)


def test_coco(sim):
    assert sim("coco", 1, 2) == approx(12 * 11 / math.sqrt(50 * 45))


@given(rating_vector_pairs())
def test_cosine_symmetric(pair):
    v1, v2 = pair
    ctx = MeasureContext(SimilarityConfig(measure="cosine"), DataConfig())
    cos = lookup_measure("cosine")
    assert cos is not None
    s12 = cos(ctx, v1, v2)
    s21 = cos(ctx, v2, v1)
    if is_used(s12):
        assert s12 == approx(s21)
        assert -1 - 1e-9 <= s12 <= 1 + 1e-9
    else:
        assert s21 == UNUSED


def test_cosine_self():
    v = RatingVector.from_mapping(1, {1: 2.0, 4: 3.5})
    ctx = MeasureContext(SimilarityConfig(measure="cosine"), DataConfig())
    cos = lookup_measure("cosine")
    assert cos is not None
    assert cos(ctx, v, v) == approx(1.0)
