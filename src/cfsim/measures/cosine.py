# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Cosine-based measures.
"""

from __future__ import annotations

import math

import numpy as np

from cfsim.data import UNUSED, RatingVector

from ._base import MeasureContext, measure


def _center(ctx: MeasureContext) -> float:
    return ctx.rating_median if ctx.config.cosine_normalized else 0.0


@measure("cosine")
def cosine(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Cosine over the common fields; with ``cosine_normalized``, ratings are
    first centered on the rating median.
    """
    return v1.cosine(v2, _center(ctx))


@measure("coj")
def coj(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Cosine over the union of rated fields.  A field rated by only one vector
    adds to that vector's length but not to the cross product, so the result
    shrinks as the vectors overlap less.
    """
    union = v1.union_ids(v2)
    center = _center(ctx)
    x = v1.dense(union, np.nan) - center
    y = v2.dense(union, np.nan) - center

    vx = float(np.nansum(x * x))
    vy = float(np.nansum(y * y))
    if vx == 0 or vy == 0:
        return UNUSED
    return float(np.nansum(x * y)) / math.sqrt(vx * vy)


@measure("coco")
def coco(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Product of rating sums over the product of vector lengths.
    """
    len1 = float(np.dot(v1.values, v1.values))
    len2 = float(np.dot(v2.values, v2.values))
    if len1 == 0 or len2 == 0:
        return UNUSED
    return v1.sum() * v2.sum() / math.sqrt(len1 * len2)
