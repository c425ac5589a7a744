# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Measures composed from other measures.  A composite is undefined whenever one
of its parts is.
"""

from __future__ import annotations

from cfsim.data import RatingVector

from ._base import MeasureContext, measure, product, total
from .correlation import pearson
from .cosine import cosine
from .distance import msd, triangle, triangle_area
from .divergence import bcf, mmd
from .overlap import jaccard, jaccard2
from .presence import amer2
from .shape import pss, urp


@measure("cosinej")
def cosine_jaccard(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    return product(cosine(ctx, v1, v2), jaccard(ctx, v1, v2))


@measure("pearsonj")
def pearson_jaccard(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    return product(pearson(ctx, v1, v2), jaccard(ctx, v1, v2))


@measure("msdj")
def msd_jaccard(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    return product(msd(ctx, v1, v2), jaccard(ctx, v1, v2))


@measure("tjm")
def triangle_jaccard(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    return product(triangle(ctx, v1, v2), jaccard(ctx, v1, v2))


@measure("amer2j")
def amer2_jaccard(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    return product(amer2(ctx, v1, v2), jaccard(ctx, v1, v2))


@measure("taj")
def triangle_area_jaccard(
    ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args
) -> float:
    return product(triangle_area(ctx, v1, v2), jaccard(ctx, v1, v2))


@measure("bcfj", needs_bins=True, needs_columns=True)
def bcf_jaccard(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    return total(bcf(ctx, v1, v2), jaccard(ctx, v1, v2))


@measure("cjacmd", needs_bins=True)
def cosine_jaccard_mmd(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Cosine plus MMD plus Jaccard.
    """
    return total(cosine(ctx, v1, v2), mmd(ctx, v1, v2), jaccard(ctx, v1, v2))


@measure("nhsm")
def nhsm(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    New heuristic similarity model: PSS times Jaccard2 times URP.
    """
    return product(pss(ctx, v1, v2), jaccard2(ctx, v1, v2), urp(ctx, v1, v2))
