# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Presence and weighting measures: the Amer family, quasi-TF-IDF, and MMNS.
These split the union of rated fields into fields rated by both vectors and
fields rated by only one of them.
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from cfsim.data import UNUSED, RatingVector

from ._base import MeasureContext, measure


class PresenceSums(NamedTuple):
    """
    Rating sums over the union of two vectors' rated fields.
    """

    n_union: int
    n_common: int
    common1: float
    "Sum of the first vector's ratings on common fields."
    common2: float
    "Sum of the second vector's ratings on common fields."
    only1: float
    "Sum of the first vector's ratings on fields the second did not rate."
    only2: float
    "Sum of the second vector's ratings on fields the first did not rate."

    @property
    def total1(self) -> float:
        return self.common1 + self.only1

    @property
    def total2(self) -> float:
        return self.common2 + self.only2


def presence_sums(v1: RatingVector, v2: RatingVector) -> PresenceSums:
    ids, x, y = v1.common(v2)
    n_union = len(v1.union_ids(v2))
    c1 = float(np.sum(x))
    c2 = float(np.sum(y))
    return PresenceSums(n_union, len(ids), c1, c2, v1.sum() - c1, v2.sum() - c2)


@measure("amer")
def amer(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Amer similarity: the mean of the agreement ratio over all known fields and
    the Dice coefficient of the rated sets.  A field counts as known if it
    appears in the dataset statistics or is rated by either vector.
    """
    union = v1.union_ids(v2)
    n_all = len(ctx.field_ids.union(union.tolist()))
    if n_all == 0:
        return UNUSED

    n_a = v1.count()
    n_b = v2.count()
    n_ab = len(v1.common(v2)[0])
    n_diff = n_a + n_b - 2 * n_ab
    if n_a + n_b == 0:
        return UNUSED

    return ((1.0 - n_diff / n_all) + (2.0 * n_ab / (n_a + n_b))) / 2.0


@measure("amer2")
def amer2(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Second Amer measure, for positive ratings:
    :math:`1 - (XY + 1) / (UV)`, where *X* and *Y* are the sums of the
    exclusively-rated values and *U* and *V* the total sums.
    """
    sums = presence_sums(v1, v2)
    if sums.n_union == 0:
        return UNUSED
    n = sums.total1 * sums.total2
    if n == 0:
        return UNUSED
    return 1.0 - (sums.only1 * sums.only2 + 1.0) / n


@measure("qti")
def quasi_tfidf(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Quasi-TF-IDF, extending Amer2: the normalized product of common sums,
    discounted by the normalized product of exclusive sums.
    """
    sums = presence_sums(v1, v2)
    if sums.n_union == 0:
        return UNUSED
    n = sums.total1 * sums.total2
    if n == 0:
        return UNUSED
    return (sums.common1 * sums.common2 / n) * (1.0 - sums.only1 * sums.only2 / n)


@measure("qtij")
def quasi_tfidf_jaccard(
    ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args
) -> float:
    """
    Quasi-TF-IDF with the common term weighted by Jaccard overlap and the
    exclusive term by its complement.
    """
    sums = presence_sums(v1, v2)
    if sums.n_union == 0:
        return UNUSED
    n = sums.total1 * sums.total2
    if n == 0:
        return UNUSED
    jac = sums.n_common / sums.n_union
    return (sums.common1 * sums.common2 * jac / n) * (
        1.0 - sums.only1 * sums.only2 * (1.0 - jac) / n
    )


@measure("mmns")
def mmns(ctx: MeasureContext, v1: RatingVector, v2: RatingVector, *args) -> float:
    """
    Numerical nearby similarity.
    """
    ids, x, y = v1.common(v2)
    n = len(ids)
    if n == 0:
        return UNUSED
    denom = v1.count() * v1.sum() + v2.count() * v2.sum()
    if denom == 0:
        return UNUSED
    return n * float(np.dot(x, y)) / denom
