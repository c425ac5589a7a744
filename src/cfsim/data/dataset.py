# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Dataset interface and in-memory implementation.
"""

from __future__ import annotations

from collections.abc import Mapping

import numpy as np
import pandas as pd
from pydantic import BaseModel, model_validator
from typing_extensions import Protocol, Self, runtime_checkable

from cfsim.diagnostics import DataError
from cfsim.logging import get_logger

from .fetcher import Fetcher, ListFetcher
from .types import EntityType
from .vectors import RatingVector

_log = get_logger(__name__)


class DataConfig(BaseModel, frozen=True):
    """
    Dataset-scoped configuration: the bounds of the rating scale.
    """

    min_rating: float = 1.0
    max_rating: float = 5.0

    @model_validator(mode="after")
    def check_range(self) -> Self:
        if self.min_rating > self.max_rating:
            raise ValueError(f"min_rating {self.min_rating} exceeds max_rating {self.max_rating}")
        return self

    @property
    def rating_median(self) -> float:
        "Midpoint of the rating scale."
        return (self.min_rating + self.max_rating) / 2.0


@runtime_checkable
class Dataset(Protocol):
    """
    Interface the similarity engine needs from a rating dataset.  Fetchers
    returned by the ``fetch_*`` methods are owned by the caller, who must
    close them.
    """

    config: DataConfig

    def fetch_user_ratings(self) -> Fetcher[RatingVector]: ...

    def fetch_item_ratings(self) -> Fetcher[RatingVector]: ...

    def user_rating(self, user: int) -> RatingVector | None: ...

    def item_rating(self, item: int) -> RatingVector | None: ...


class MemoryDataset:
    """
    Dataset held in memory as user and item rating vectors.

    Args:
        users:
            The user rating vectors (user ID to ratings of items).
        items:
            The item rating vectors (item ID to ratings from users).
        config:
            The rating scale.
    """

    config: DataConfig
    _users: dict[int, RatingVector]
    _items: dict[int, RatingVector]

    def __init__(
        self,
        users: Mapping[int, RatingVector],
        items: Mapping[int, RatingVector],
        config: DataConfig | None = None,
    ):
        self._users = dict(users)
        self._items = dict(items)
        self.config = config if config is not None else DataConfig()

    @classmethod
    def from_ratings_df(
        cls,
        df: pd.DataFrame,
        *,
        min_rating: float | None = None,
        max_rating: float | None = None,
    ) -> MemoryDataset:
        """
        Build a dataset from a data frame with ``user``, ``item``, and
        ``rating`` columns.  Rating scale bounds default to the smallest and
        largest ratings present.
        """
        missing = {"user", "item", "rating"} - set(df.columns)
        if missing:
            raise DataError(f"rating frame missing columns {sorted(missing)}")
        if df.duplicated(["user", "item"]).any():
            raise DataError("rating frame has repeated (user, item) pairs")

        if min_rating is None:
            min_rating = float(df["rating"].min()) if len(df) else 1.0
        if max_rating is None:
            max_rating = float(df["rating"].max()) if len(df) else 5.0

        users = {
            int(u): RatingVector(int(u), g["item"].to_numpy(), g["rating"].to_numpy())
            for u, g in df.groupby("user", sort=True)
        }
        items = {
            int(i): RatingVector(int(i), g["user"].to_numpy(), g["rating"].to_numpy())
            for i, g in df.groupby("item", sort=True)
        }
        _log.debug("built in-memory dataset", n_users=len(users), n_items=len(items), n_ratings=len(df))
        return cls(users, items, DataConfig(min_rating=min_rating, max_rating=max_rating))

    @classmethod
    def from_mapping(
        cls,
        ratings: Mapping[int, Mapping[int, float]],
        *,
        min_rating: float | None = None,
        max_rating: float | None = None,
    ) -> MemoryDataset:
        """
        Build a dataset from a nested mapping of user ID to item ID to rating.
        """
        rows = [(u, i, r) for u, urs in ratings.items() for i, r in urs.items()]
        df = pd.DataFrame.from_records(rows, columns=["user", "item", "rating"])
        df = df.astype({"user": np.int64, "item": np.int64, "rating": np.float64})
        return cls.from_ratings_df(df, min_rating=min_rating, max_rating=max_rating)

    def fetch_user_ratings(self) -> Fetcher[RatingVector]:
        return ListFetcher(self._users.values())

    def fetch_item_ratings(self) -> Fetcher[RatingVector]:
        return ListFetcher(self._items.values())

    def user_rating(self, user: int) -> RatingVector | None:
        return self._users.get(user, None)

    def item_rating(self, item: int) -> RatingVector | None:
        return self._items.get(item, None)

    def entity_rating(self, entity: EntityType, id: int) -> RatingVector | None:
        "Look up a rating vector by entity type."
        if entity == "user":
            return self.user_rating(id)
        else:
            return self.item_rating(id)

    @property
    def user_ids(self) -> list[int]:
        return list(self._users.keys())

    @property
    def item_ids(self) -> list[int]:
        return list(self._items.keys())

    def __str__(self) -> str:
        return "<MemoryDataset ({} users, {} items)>".format(len(self._users), len(self._items))
