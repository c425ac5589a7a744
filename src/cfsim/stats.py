# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Per-entity and global rating statistics.
"""

from __future__ import annotations

from contextlib import closing
from dataclasses import dataclass, field

from cfsim.data import UNUSED, Dataset, EntityType, Fetcher, RatingVector
from cfsim.logging import Stopwatch, get_logger

_log = get_logger(__name__)


@dataclass
class RatingStats:
    """
    Rating statistics for one entity type.

    Attributes:
        entity:
            The entity type these statistics describe.
        rating_mean:
            Mean of all ratings (:data:`~cfsim.data.UNUSED` if there are none).
        rating_var:
            Population variance of all ratings around :attr:`rating_mean`.
        means:
            Mean rating of each entity.
        variances:
            Population variance of each entity's ratings around its own mean.
        n_ratings:
            The total number of ratings scanned.
    """

    entity: EntityType
    rating_mean: float = UNUSED
    rating_var: float = UNUSED
    means: dict[int, float] = field(default_factory=dict)
    variances: dict[int, float] = field(default_factory=dict)
    n_ratings: int = 0

    @property
    def ids(self) -> set[int]:
        "Identifiers of the entities with at least one rating."
        return set(self.means.keys())

    def __len__(self) -> int:
        return len(self.means)


def compute_user_stats(dataset: Dataset) -> RatingStats:
    """
    Compute user means and variances, along with the global rating mean and
    variance.
    """
    return aggregate_stats(dataset.fetch_user_ratings(), "user")


def compute_item_stats(dataset: Dataset) -> RatingStats:
    """
    Compute item means and variances, along with the global rating mean and
    variance.
    """
    return aggregate_stats(dataset.fetch_item_ratings(), "item")


def aggregate_stats(fetcher: Fetcher[RatingVector], entity: EntityType) -> RatingStats:
    """
    Scan a fetcher twice to compute rating statistics.  The first pass finds
    entity and global means; the second accumulates squared deviations from
    them.  Entities without ratings are skipped.  The fetcher is closed when
    the scan finishes, whether or not it succeeds; errors from the fetcher
    propagate unchanged.

    Args:
        fetcher:
            The entity rating vectors to scan.  It must be restartable.
        entity:
            The type of entity the fetcher yields.
    """
    log = _log.bind(entity=entity)
    timer = Stopwatch()
    stats = RatingStats(entity)

    with closing(fetcher):
        total = 0.0
        count = 0
        for vec in fetcher:
            if vec is None or vec.count() == 0:
                continue

            values = vec.values
            stats.means[vec.id] = float(values.sum()) / len(values)
            total += float(values.sum())
            count += len(values)

        if count == 0:
            log.warning("no ratings found")
            return stats

        stats.n_ratings = count
        stats.rating_mean = total / count

        sq_total = 0.0
        for vec in fetcher:
            if vec is None or vec.count() == 0:
                continue

            values = vec.values
            dev = values - stats.means[vec.id]
            stats.variances[vec.id] = float(dev @ dev) / len(values)
            gdev = values - stats.rating_mean
            sq_total += float(gdev @ gdev)

        stats.rating_var = sq_total / count

    log.info(
        "computed rating statistics",
        n_entities=len(stats.means),
        n_ratings=count,
        mean=stats.rating_mean,
        time=str(timer),
    )
    return stats
