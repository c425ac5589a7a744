# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Discretization of rating values into value bins and rank bins.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from cfsim.data import RatingVector


def parse_value_bins(text: str | None) -> list[float]:
    """
    Parse a comma-separated list of numeric bin values, such as
    ``"1, 2, 3, 4, 5"``.  The result is sorted and free of duplicates; an
    empty or ``None`` string yields no bins.

    Raises:
        ValueError: if an entry is not a number.
    """
    if text is None:
        return []
    parts = [p.strip() for p in text.split(",")]
    parts = [p for p in parts if p]
    try:
        values = [float(p) for p in parts]
    except ValueError as e:
        raise ValueError(f"invalid value bins {text!r}: {e}") from e
    return sorted(set(values))


def extract_value_bins(v1: RatingVector, v2: RatingVector) -> list[float]:
    """
    Get the sorted distinct rating values occurring in either vector.
    """
    return np.union1d(v1.values, v2.values).tolist()


def to_rank_bins(value_bins: Sequence[float]) -> dict[float, int]:
    """
    Convert value bins to rank bins.  The largest value gets rank 1 and the
    smallest gets rank N.
    """
    ordered = sorted(set(value_bins))
    n = len(ordered)
    return {v: n - i for i, v in enumerate(ordered)}


def extract_rank_bins(v1: RatingVector, v2: RatingVector) -> dict[float, int]:
    """
    Derive rank bins from the values occurring in two vectors.
    """
    return to_rank_bins(extract_value_bins(v1, v2))


def bin_counts(vector: RatingVector, bins: Sequence[float]) -> NDArray[np.int64]:
    """
    Count the ratings in a vector exactly equal to each bin value.
    """
    bins = np.asarray(bins, dtype=np.float64)
    return np.sum(vector.values[None, :] == bins[:, None], axis=1, dtype=np.int64)
