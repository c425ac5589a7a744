# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Distance-based measures: mean squared difference and the triangle family.
"""

from __future__ import annotations

import numpy as np

from cfsim.data import UNUSED, RatingVector

from ._base import MeasureContext, measure


@measure("msd")
def msd(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Mean squared difference over the common fields, either as
    :math:`1 / (1 + \\mathrm{MSD})` (``msd_fraction``) or normalized by the
    squared maximum rating.
    """
    _ids, x, y = v1.common(v2)
    n = len(x)
    if n == 0:
        return UNUSED

    d = x - y
    sq = float(np.dot(d, d))
    if ctx.config.msd_fraction:
        return 1.0 / (1.0 + sq / n)

    max_rating = ctx.data_config.max_rating
    if max_rating == 0:
        return UNUSED
    return 1.0 - sq / (n * max_rating * max_rating)


@measure("triangle")
def triangle(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Triangle similarity: one minus the distance between the vectors relative
    to the sum of their lengths.
    """
    length = v1.module() + v2.module()
    if length == 0:
        return UNUSED
    return 1.0 - v1.distance(v2) / length


@measure("ta")
def triangle_area(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Triangle-area similarity over the common fields.  The squared projection
    of the shorter vector onto the longer one is scaled by the vector
    lengths; opposed vectors give a negative score.  With ``ta_normalized``,
    ratings are centered on the rating median first.
    """
    _ids, x, y = v1.common(v2)
    if len(x) == 0:
        return UNUSED
    if ctx.config.ta_normalized:
        x = x - ctx.rating_median
        y = y - ctx.rating_median

    a = float(np.sqrt(np.dot(x, x)))
    b = float(np.sqrt(np.dot(y, y)))
    if a == 0 or b == 0:
        return UNUSED

    p = float(np.dot(x, y))
    if p >= 0:
        if a < b:
            return p * p / (a * b * b * b)
        else:
            return p * p / (a * a * a * b)
    else:
        if a < b:
            return p / (b * b)
        else:
            return p / (a * a)
