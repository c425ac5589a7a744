# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Sparse rating vectors.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

import numpy as np
from numpy.typing import ArrayLike, NDArray

from cfsim.diagnostics import DataError, FieldError

from .types import UNUSED


class RatingVector:
    """
    The ratings of one entity (a user's ratings of items, or an item's ratings
    from users), stored as sorted field IDs with aligned values.

    Fields may be present without being rated; a NaN value marks a known but
    unrated field.  Every aggregate and comparison works only on *rated*
    fields.

    Args:
        id:
            The identifier of the entity owning the vector.
        fields:
            The field (user or item) identifiers.
        values:
            The rating values, aligned with ``fields``.
    """

    __slots__ = ("_id", "_fields", "_field_values", "_ids", "_values")

    _id: int
    _fields: NDArray[np.int64]
    _field_values: NDArray[np.float64]
    _ids: NDArray[np.int64]
    _values: NDArray[np.float64]

    def __init__(self, id: int, fields: ArrayLike, values: ArrayLike):
        fields = np.asarray(fields, dtype=np.int64).reshape(-1)
        values = np.asarray(values, dtype=np.float64).reshape(-1)
        if fields.shape != values.shape:
            raise ValueError(f"{len(fields)} field IDs but {len(values)} values")

        order = np.argsort(fields, kind="stable")
        fields = fields[order]
        values = values[order]
        if len(fields) > 1 and np.any(fields[1:] == fields[:-1]):
            raise DataError(f"rating vector {id} has duplicate field IDs")

        rated = ~np.isnan(values)
        self._id = int(id)
        self._fields = fields
        self._field_values = values
        self._ids = fields[rated]
        self._values = values[rated]
        for arr in (self._fields, self._field_values, self._ids, self._values):
            arr.setflags(write=False)

    @classmethod
    def from_mapping(cls, id: int, ratings: Mapping[int, float | None]) -> RatingVector:
        """
        Create a rating vector from a mapping of field IDs to ratings.  A value
        of ``None`` marks a known but unrated field.
        """
        fields = np.fromiter(ratings.keys(), dtype=np.int64, count=len(ratings))
        values = np.fromiter(
            (np.nan if v is None else v for v in ratings.values()),
            dtype=np.float64,
            count=len(ratings),
        )
        return cls(id, fields, values)

    @property
    def id(self) -> int:
        "The identifier of the vector's owner."
        return self._id

    @property
    def ids(self) -> NDArray[np.int64]:
        "The sorted IDs of the rated fields."
        return self._ids

    @property
    def values(self) -> NDArray[np.float64]:
        "The rating values, aligned with :attr:`ids`."
        return self._values

    def field_ids(self, rated: bool = False) -> NDArray[np.int64]:
        """
        Get the field IDs, optionally restricted to rated fields.
        """
        return self._ids if rated else self._fields

    def rated_ids(self) -> set[int]:
        "Get the rated field IDs as a Python set."
        return set(self._ids.tolist())

    def _position(self, field: int) -> int:
        pos = int(np.searchsorted(self._ids, field))
        if pos < len(self._ids) and self._ids[pos] == field:
            return pos
        return -1

    def is_rated(self, field: int) -> bool:
        "Query whether a field has been rated."
        return self._position(field) >= 0

    def __contains__(self, field: object) -> bool:
        return isinstance(field, (int, np.integer)) and self.is_rated(int(field))

    def get(self, field: int, default: float | None = None) -> float | None:
        """
        Look up the rating for a field, returning ``default`` if the field is
        not rated.
        """
        pos = self._position(field)
        if pos < 0:
            return default
        return float(self._values[pos])

    def value(self, field: int) -> float:
        """
        Get the rating of a field that is known to be rated.

        Raises:
            FieldError: if the field is not rated.
        """
        pos = self._position(field)
        if pos < 0:
            raise FieldError(self._id, field)
        return float(self._values[pos])

    def items(self) -> Iterator[tuple[int, float]]:
        "Iterate over (field, rating) pairs of rated fields."
        for f, v in zip(self._ids.tolist(), self._values.tolist()):
            yield f, v

    def to_dict(self) -> dict[int, float]:
        return dict(self.items())

    def count(self) -> int:
        "Number of rated fields."
        return len(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def sum(self) -> float:
        return float(np.sum(self._values))

    def mean(self) -> float:
        "Mean rating, or :data:`UNUSED` for an empty vector."
        if len(self._values) == 0:
            return UNUSED
        return float(np.mean(self._values))

    def mle_var(self) -> float:
        """
        Maximum-likelihood (population) variance of the ratings, or
        :data:`UNUSED` for an empty vector.
        """
        if len(self._values) == 0:
            return UNUSED
        return float(np.var(self._values))

    def module(self) -> float:
        "Euclidean length of the rated values."
        return float(np.sqrt(np.dot(self._values, self._values)))

    def common(
        self, other: RatingVector
    ) -> tuple[NDArray[np.int64], NDArray[np.float64], NDArray[np.float64]]:
        """
        Find the fields rated in both vectors.

        Returns:
            The common field IDs, and this vector's and the other vector's
            ratings for them.
        """
        ids, i1, i2 = np.intersect1d(self._ids, other._ids, assume_unique=True, return_indices=True)
        return ids, self._values[i1], other._values[i2]

    def union_ids(self, other: RatingVector) -> NDArray[np.int64]:
        "Get the fields rated in at least one of the vectors."
        return np.union1d(self._ids, other._ids)

    def dense(self, fields: NDArray[np.int64], fill: float = 0.0) -> NDArray[np.float64]:
        """
        Expand this vector onto a sorted set of field IDs, filling fields it
        has not rated with ``fill``.
        """
        out = np.full(len(fields), fill, dtype=np.float64)
        pos = np.searchsorted(fields, self._ids)
        ok = pos < len(fields)
        ok[ok] = fields[pos[ok]] == self._ids[ok]
        out[pos[ok]] = self._values[ok]
        return out

    def cosine(self, other: RatingVector, center: float = 0.0) -> float:
        """
        Cosine of the two vectors over their common fields, after subtracting
        ``center`` from every rating.
        """
        _ids, x, y = self.common(other)
        if len(x) == 0:
            return UNUSED
        x = x - center
        y = y - center
        vx = np.dot(x, x)
        vy = np.dot(y, y)
        if vx == 0 or vy == 0:
            return UNUSED
        return float(np.dot(x, y) / np.sqrt(vx * vy))

    def corr(self, other: RatingVector) -> float:
        """
        Pearson correlation over the common fields.  Deviations are taken from
        each vector's mean over all of its rated fields.
        """
        _ids, x, y = self.common(other)
        if len(x) == 0:
            return UNUSED
        x = x - np.mean(self._values)
        y = y - np.mean(other._values)
        vx = np.dot(x, x)
        vy = np.dot(y, y)
        if vx == 0 or vy == 0:
            return UNUSED
        return float(np.dot(x, y) / np.sqrt(vx * vy))

    def distance(self, other: RatingVector) -> float:
        """
        Euclidean distance over the union of rated fields, where a field rated
        by only one vector counts as zero in the other.
        """
        union = self.union_ids(other)
        diff = self.dense(union) - other.dense(union)
        return float(np.sqrt(np.dot(diff, diff)))

    def __repr__(self) -> str:
        return "<RatingVector {}: {} rated of {} fields>".format(
            self._id, len(self._ids), len(self._fields)
        )
