# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

import math

from pytest import approx, mark

from cfsim.data import UNUSED, MappingColumns, MemoryDataset, is_used
from cfsim.engine import SimilarityEngine
from cfsim.measures.divergence import mmd_theta


def test_bc(sim):
    # user 1 rates 3, 4, 5; user 2 rates 2, 4, 5
    assert sim("bc", 1, 2) == approx(2 / 3)
    assert sim("bc", 1, 1) == approx(1.0)


def test_bc_extracted_bins(sim):
    assert sim("bc", 1, 2, value_bins="") == approx(2 / 3)


def test_mmd_theta():
    assert mmd_theta(0, 3) == approx(math.pi / 2)
    assert mmd_theta(3, 3) == approx(-math.pi / 2)


def test_mmd(sim):
    bias = (math.pi / 2 - math.asin(1 / 3)) ** 2
    total = -4 + 2 * (bias - 2 - 2 / 3) + 2 * (-4 / 3)
    assert sim("mmd", 1, 2) == approx(1 / (1 + total / 5))


def test_src(sim):
    # ranks are (1, 3, 2) and (2, 4, 1)
    assert sim("src", 1, 2) == approx(0.25)


def test_src_fallback_ranks(sim):
    assert sim("src", 1, 2, value_bins="1,2") == approx(0.25)


def test_src_too_few(sim):
    assert sim("src", 1, 3) == UNUSED


def test_bcf_symmetric(sim):
    s12 = sim("bcf", 1, 2)
    s21 = sim("bcf", 2, 1)
    assert is_used(s12)
    assert s12 == approx(s21)


def test_bcf_mean_mode(sim):
    s = sim("bcf", 1, 3, bcf_median=False)
    assert is_used(s)


@mark.parametrize("median, expected", [(True, 0.8), (False, 2.25 / 41 + 2.25 / 5)])
def test_bcf_value(median: bool, expected: float):
    # item 1 is rated {5, 4} and item 2 {2, 1}, so their columns do not
    # overlap in any bin.  User means are 3.5 and 2.5, so both users deviate
    # by 1.5 from their own means but by (2, -1) and (1, -2) from the median.
    ds = MemoryDataset.from_mapping(
        {1: {1: 5.0, 2: 2.0}, 2: {1: 4.0, 2: 1.0}}, min_rating=1.0, max_rating=5.0
    )
    eng = SimilarityEngine(measure="bcf", bcf_median_mode=median)
    eng.setup(ds)
    u1 = ds.user_rating(1)
    u2 = ds.user_rating(2)
    assert u1 is not None and u2 is not None

    # median mode centers the column modules, giving sqrt(5) for both items;
    # mean mode uses the raw lengths sqrt(41) and sqrt(5)
    assert eng.similarity(u1, u2) == approx(expected)


def test_bcf_caches_columns(sample_ds: MemoryDataset):
    eng = SimilarityEngine(measure="bcf")
    eng.setup(sample_ds)
    u1 = sample_ds.user_rating(1)
    u2 = sample_ds.user_rating(2)
    assert u1 is not None and u2 is not None
    eng.similarity(u1, u2)
    session = eng._session
    assert session is not None
    assert session.context.column_bc is not None
    assert session.context.column_modules is not None
    assert len(session.context.column_bc) == 9
    assert len(session.context.column_modules) == 3
    eng.unsetup()


def test_bcf_missing_columns(sample_ds: MemoryDataset):
    eng = SimilarityEngine(measure="bcf")
    eng.setup(sample_ds, columns=MappingColumns({}))
    u1 = sample_ds.user_rating(1)
    u2 = sample_ds.user_rating(2)
    assert u1 is not None and u2 is not None
    assert eng.similarity(u1, u2) == approx(0.0)
