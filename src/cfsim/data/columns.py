# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Access to the column (transposed) view of a rating matrix.
"""

from __future__ import annotations

from collections.abc import Mapping

from typing_extensions import Protocol, runtime_checkable

from .dataset import Dataset
from .types import EntityType
from .vectors import RatingVector


@runtime_checkable
class ColumnAccessor(Protocol):
    """
    Source of column rating vectors.  When users are the rows being compared,
    a column is an item's vector of ratings from users, and vice versa.
    Unknown IDs yield ``None``.
    """

    def column_rating(self, column: int) -> RatingVector | None: ...


class DatasetColumns:
    """
    Column accessor reading vectors of one entity type from a dataset.

    Args:
        dataset:
            The dataset to read.
        entity:
            The entity type of the columns (``"item"`` when users are rows).
    """

    dataset: Dataset
    entity: EntityType

    def __init__(self, dataset: Dataset, entity: EntityType):
        self.dataset = dataset
        self.entity = entity

    def column_rating(self, column: int) -> RatingVector | None:
        if self.entity == "item":
            return self.dataset.item_rating(column)
        else:
            return self.dataset.user_rating(column)

    def __repr__(self) -> str:
        return f"<DatasetColumns {self.entity}s of {self.dataset}>"


class MappingColumns:
    """
    Column accessor over a mapping of prebuilt column vectors.
    """

    def __init__(self, vectors: Mapping[int, RatingVector]):
        self._vectors = dict(vectors)

    def column_rating(self, column: int) -> RatingVector | None:
        return self._vectors.get(column, None)
