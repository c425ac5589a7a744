# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Measures over discretized rating distributions: Bhattacharyya coefficient,
BCF, mean measure of divergence, and Spearman rank correlation.
"""

from __future__ import annotations

import numpy as np

from cfsim.bins import bin_counts, extract_rank_bins, extract_value_bins
from cfsim.cache import cache_or_compute
from cfsim.data import UNUSED, RatingVector, is_used
from cfsim.logging import get_logger

from ._base import MeasureContext, measure

_log = get_logger(__name__)


def _value_bins(ctx: MeasureContext, v1: RatingVector, v2: RatingVector) -> list[float]:
    if ctx.value_bins:
        return ctx.value_bins
    return extract_value_bins(v1, v2)


def bhattacharyya(ctx: MeasureContext, v1: RatingVector, v2: RatingVector) -> float:
    """
    Bhattacharyya coefficient between the two vectors' rating distributions
    over the value bins.
    """
    n1 = v1.count()
    n2 = v2.count()
    if n1 == 0 or n2 == 0:
        return UNUSED

    bins = _value_bins(ctx, v1, v2)
    p1 = bin_counts(v1, bins) / n1
    p2 = bin_counts(v2, bins) / n2
    return float(np.sum(np.sqrt(p1 * p2)))


@measure("bc", needs_bins=True)
def bc(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    "Bhattacharyya coefficient of the two rating vectors."
    return bhattacharyya(ctx, v1, v2)


def column_bc(ctx: MeasureContext, c1: RatingVector, c2: RatingVector) -> float:
    """
    Bhattacharyya coefficient of two column vectors, memoized by column IDs.
    """
    return cache_or_compute(ctx.column_bc, (c1.id, c2.id), lambda: bhattacharyya(ctx, c1, c2))


def column_module(ctx: MeasureContext, column: RatingVector) -> float:
    """
    Length of a column vector for BCF, memoized by column ID.  In median mode
    the ratings are centered on the rating median.
    """

    def compute() -> float:
        values = column.values
        if ctx.config.bcf_median_mode:
            values = values - ctx.rating_median
        return float(np.sqrt(np.dot(values, values)))

    return cache_or_compute(ctx.column_modules, column.id, compute)


@measure("bcf", needs_bins=True, needs_columns=True)
def bcf(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    BCF similarity: for every pair of fields rated by the two vectors, the
    Bhattacharyya coefficient of the two field columns weighted by the product
    of the normalized rating deviations.  Deviations are from the rating
    median in median mode and from each vector's mean otherwise.
    """
    if v1.count() == 0 or v2.count() == 0:
        return UNUSED
    if ctx.columns is None:
        _log.debug("no column accessor, cannot compute bcf")
        return UNUSED

    median_mode = ctx.config.bcf_median_mode
    ref1 = ctx.rating_median if median_mode else v1.mean()
    ref2 = ctx.rating_median if median_mode else v2.mean()

    seconds = []
    for f2, r2 in v2.items():
        col2 = ctx.columns.column_rating(f2)
        if col2 is None:
            continue
        mod2 = column_module(ctx, col2)
        if not is_used(mod2) or mod2 == 0:
            continue
        seconds.append((col2, r2 - ref2, mod2))

    total = 0.0
    for f1, r1 in v1.items():
        col1 = ctx.columns.column_rating(f1)
        if col1 is None:
            continue
        mod1 = column_module(ctx, col1)
        if not is_used(mod1) or mod1 == 0:
            continue

        dev1 = r1 - ref1
        for col2, dev2, mod2 in seconds:
            coef = column_bc(ctx, col1, col2)
            if not is_used(coef):
                continue
            total += coef * dev1 * dev2 / (mod1 * mod2)

    return total


def mmd_theta(n: np.ndarray, N: int) -> np.ndarray:
    """
    Angular (Grewal) transform of trait frequencies for MMD:
    :math:`\\sin^{-1}(1 - 2n/N)`.
    """
    return np.arcsin(1.0 - 2.0 * n / N)


@measure("mmd", needs_bins=True)
def mmd(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Mean measure of divergence between the rating distributions, mapped to
    :math:`1 / (1 + \\mathrm{MMD})`.
    """
    N1 = v1.count()
    N2 = v2.count()
    if N1 == 0 or N2 == 0:
        return UNUSED

    bins = _value_bins(ctx, v1, v2)
    if not bins:
        return UNUSED
    n1 = bin_counts(v1, bins).astype(np.float64)
    n2 = bin_counts(v2, bins).astype(np.float64)

    bias = mmd_theta(n1, N1) - mmd_theta(n2, N2)
    terms = bias * bias - 1.0 / (0.5 + n1) - 1.0 / (0.5 + n2)
    denom = 1.0 + float(np.sum(terms)) / len(bins)
    if denom == 0:
        return UNUSED
    return 1.0 / denom


@measure("src")
def src(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Spearman rank correlation over the common fields, ranking ratings by the
    rank bins.  Ratings outside the configured bins fall back to ranks
    derived from the two vectors.
    """
    _ids, x, y = v1.common(v2)
    n = len(x)
    if n < 2:
        return UNUSED

    ranks = ctx.rank_bins
    if not ranks or any(v not in ranks for v in np.union1d(x, y).tolist()):
        ranks = extract_rank_bins(v1, v2)

    r1 = np.array([ranks[v] for v in x.tolist()], dtype=np.float64)
    r2 = np.array([ranks[v] for v in y.tolist()], dtype=np.float64)
    d = r1 - r2
    return 1.0 - 6.0 * float(np.dot(d, d)) / (n * (n * n - 1))
