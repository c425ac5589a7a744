# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Pearson correlation and its variants.
"""

from __future__ import annotations

import math

from cfsim.data import UNUSED, RatingVector, is_used

from ._base import MeasureContext, deviation_cosine, measure, with_field_means

WPC_THRESHOLD = 50
"Common-field count at which weighted Pearson reaches full weight."


@measure("pearson")
def pearson(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Pearson correlation over the common fields.
    """
    return v1.corr(v2)


@measure("cpc")
def cpc(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Constrained Pearson correlation: deviations are taken from the rating
    median instead of each vector's mean.
    """
    _ids, x, y = v1.common(v2)
    if len(x) == 0:
        return UNUSED
    return deviation_cosine(x - ctx.rating_median, y - ctx.rating_median)


@measure("wpc")
def wpc(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Weighted Pearson correlation, scaled down linearly when fewer than
    :data:`WPC_THRESHOLD` fields are in common.
    """
    corr = pearson(ctx, v1, v2)
    if not is_used(corr):
        return UNUSED
    n = len(v1.common(v2)[0])
    if n <= WPC_THRESHOLD:
        return corr * (n / WPC_THRESHOLD)
    else:
        return corr


@measure("spc")
def spc(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Sigmoid Pearson correlation, scaled by a logistic function of the number
    of common fields.
    """
    corr = pearson(ctx, v1, v2)
    if not is_used(corr):
        return UNUSED
    n = len(v1.common(v2)[0])
    return corr / (1 + math.exp(-n / 2.0))


@measure("cod")
def cod(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Adjusted cosine: correlation of deviations from each field's mean.  Fields
    without a known mean are ignored.
    """
    ids, x, y = v1.common(v2)
    ids, x, y, means = with_field_means(ctx, ids, x, y)
    if len(ids) == 0:
        return UNUSED
    return deviation_cosine(x - means, y - means)
