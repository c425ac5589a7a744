# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Overlap (set-based) measures.
"""

from __future__ import annotations

from cfsim.data import UNUSED, RatingVector

from ._base import MeasureContext, measure


@measure("jaccard")
def jaccard(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Common fields over union fields.
    """
    n_union = len(v1.union_ids(v2))
    if n_union == 0:
        return UNUSED
    return len(v1.common(v2)[0]) / n_union


@measure("jaccard2")
def jaccard2(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Common fields over the product of the two rated-field counts.
    """
    n1 = v1.count()
    n2 = v2.count()
    if n1 == 0 or n2 == 0:
        return UNUSED
    return len(v1.common(v2)[0]) / (n1 * n2)
