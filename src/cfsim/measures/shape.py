# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Measures built from the shape of the rating distributions: URP, PSS, PIP, PC,
Feng, Mu, and SMTP.
"""

from __future__ import annotations

import math
from numbers import Number

import numpy as np

from cfsim.cache import cache_or_compute
from cfsim.data import UNUSED, Profile, RatingVector, is_used
from cfsim.logging import get_logger

from ._base import MeasureContext, logistic, measure, with_field_means
from .correlation import pearson
from .cosine import coj
from .divergence import bhattacharyya
from .overlap import jaccard

_log = get_logger(__name__)


@measure("urp")
def urp(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    User rating preference: penalizes differences in both the mean and the
    variance of the two vectors.
    """
    if v1.count() == 0 or v2.count() == 0:
        return UNUSED
    dm = abs(v1.mean() - v2.mean())
    dv = abs(v1.mle_var() - v2.mle_var())
    return 1.0 - logistic(dm * dv)


@measure("pss")
def pss(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Proximity-significance-singularity: sums, over common fields, the product
    of rating proximity, distance from the rating median, and distance from
    the field mean.
    """
    ids, x, y = v1.common(v2)
    ids, x, y, means = with_field_means(ctx, ids, x, y)
    if len(ids) == 0:
        return UNUSED

    med = ctx.rating_median
    result = 0.0
    for r1, r2, mean in zip(x.tolist(), y.tolist(), means.tolist()):
        proximity = 1.0 - logistic(abs(r1 - r2))
        significance = logistic(abs(r1 - med) * abs(r2 - med))
        singularity = 1.0 - logistic(abs((r1 + r2) / 2.0 - mean))
        result += proximity * significance * singularity

    return result


def agree(ctx: MeasureContext, r1: float, r2: float) -> bool:
    """
    Check whether two ratings fall on the same side of the rating median (a
    rating at the median agrees with anything).
    """
    med = ctx.rating_median
    return not ((r1 > med and r2 < med) or (r1 < med and r2 > med))


@measure("pip")
def pip(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Proximity-impact-popularity over the common fields.
    """
    ids, x, y = v1.common(v2)
    ids, x, y, means = with_field_means(ctx, ids, x, y)
    if len(ids) == 0:
        return UNUSED

    med = ctx.rating_median
    span = ctx.data_config.max_rating - ctx.data_config.min_rating
    result = 0.0
    for r1, r2, mean in zip(x.tolist(), y.tolist(), means.tolist()):
        agreed = agree(ctx, r1, r2)

        d = abs(r1 - r2) if agreed else 2 * abs(r1 - r2)
        proximity = (2 * span + 1 - d) ** 2

        impact = (abs(r1 - med) + 1) * (abs(r2 - med) + 1)
        if not agreed:
            impact = 1 / impact

        popularity = 1.0
        if (r1 > mean and r2 > mean) or (r1 < mean and r2 < mean):
            bias = (r1 + r2) / 2 - mean
            popularity = 1 + bias * bias

        result += proximity * impact * popularity

    return result


def column_corr(ctx: MeasureContext, fixed: int, column: int) -> float:
    """
    Correlation between two column vectors, memoized by (fixed, column).
    """

    def compute() -> float:
        assert ctx.columns is not None
        fixed_vec = ctx.columns.column_rating(fixed)
        col_vec = ctx.columns.column_rating(column)
        if fixed_vec is None or col_vec is None:
            return UNUSED
        return fixed_vec.corr(col_vec)

    return cache_or_compute(ctx.column_corr, (fixed, column), compute)


@measure("pc", cacheable=False, needs_columns=True)
def pc(
    ctx: MeasureContext,
    v1: RatingVector,
    v2: RatingVector,
    p1: Profile | None = None,
    p2: Profile | None = None,
    *params,
) -> float:
    """
    Partial correlation with respect to a fixed column.  Each common field's
    contribution is weighted by the squared correlation between its column and
    the fixed column, whose ID is the first extra parameter.  Fields whose
    column correlation is undefined get no weight.
    """
    if not params or isinstance(params[0], bool) or not isinstance(params[0], Number):
        return UNUSED
    if ctx.columns is None:
        _log.debug("no column accessor, cannot compute pc")
        return UNUSED
    fixed = int(params[0])  # type: ignore

    ids, x, y = v1.common(v2)
    ids, x, y, means = with_field_means(ctx, ids, x, y)
    if len(ids) == 0:
        return UNUSED

    vx = vy = vxy = 0.0
    for fid, r1, r2, mean in zip(ids.tolist(), x.tolist(), y.tolist(), means.tolist()):
        weight = column_corr(ctx, fixed, fid)
        if not is_used(weight):
            continue
        weight = weight * weight

        d1 = r1 - mean
        d2 = r2 - mean
        vx += d1 * d1 * weight
        vy += d2 * d2 * weight
        vxy += d1 * d2 * weight

    if vx == 0 or vy == 0:
        return UNUSED
    return vxy / math.sqrt(vx * vy)


@measure("feng")
def feng(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Feng similarity: union cosine times a logistic overlap factor times URP.
    """
    n1 = v1.count()
    n2 = v2.count()
    if n1 == 0 or n2 == 0:
        return UNUSED

    s1 = coj(ctx, v1, v2)
    if not is_used(s1):
        return UNUSED
    n = len(v1.common(v2)[0])
    s2 = logistic(n * n / (n1 * n2))
    s3 = urp(ctx, v1, v2)
    return s1 * s2 * s3


@measure("mu", needs_bins=True)
def mu(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Mu similarity: blends Pearson correlation with the Hellinger distance of
    the rating distributions and Jaccard overlap, using ``mu_alpha``.
    """
    alpha = ctx.config.mu_alpha
    corr = pearson(ctx, v1, v2)
    coef = bhattacharyya(ctx, v1, v2)
    jac = jaccard(ctx, v1, v2)
    if not (is_used(corr) and is_used(coef) and is_used(jac)):
        return UNUSED
    return alpha * corr + (1 - alpha) * ((1 - coef) + jac)


@measure("smtp")
def smtp(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    SMTP similarity over the common fields that have a known variance.  A
    field rated non-zero by both contributes
    :math:`\\frac{1}{2}(1 + e^{-(x - y)^2 / \\sigma^2})`; a field rated zero by
    exactly one contributes :math:`-\\lambda`; a field rated zero by both is
    ignored.  The variance is the field's own unless ``smtp_general_var`` is
    set, in which case the global rating variance is used.
    """
    ids, x, y = v1.common(v2)
    if ctx.config.smtp_general_var:
        if not is_used(ctx.rating_var):
            return UNUSED
        variances = np.full(len(ids), ctx.rating_var)
    else:
        variances = np.array([ctx.field_vars.get(int(f), np.nan) for f in ids], dtype=np.float64)
        known = ~np.isnan(variances)
        ids, x, y, variances = ids[known], x[known], y[known], variances[known]
    if len(ids) == 0:
        return UNUSED

    lam = ctx.config.smtp_lambda
    nz1 = x != 0
    nz2 = y != 0
    both = nz1 & nz2
    either = nz1 | nz2
    n_either = int(np.sum(either))
    if n_either == 0:
        return UNUSED

    diff = x[both] - y[both]
    var = variances[both]
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = np.where(var > 0, diff * diff / var, np.where(diff == 0, 0.0, np.inf))
    score = float(np.sum(0.5 * (1 + np.exp(-ratio))))
    score -= lam * int(np.sum(either & ~both))

    f = score / n_either
    return (f + lam) / (1 + lam)
