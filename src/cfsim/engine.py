# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
The similarity engine: configuration, per-dataset session state, and measure
dispatch.
"""

# pyright: basic
from __future__ import annotations

import threading
import warnings
from dataclasses import dataclass

from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing_extensions import Any, Literal, override

from cfsim.bins import parse_value_bins, to_rank_bins
from cfsim.cache import KeyedCache, PairCache
from cfsim.component import Component
from cfsim.config import cfsim_config
from cfsim.data import (
    UNUSED,
    ColumnAccessor,
    Dataset,
    DatasetColumns,
    Profile,
    RatingVector,
    opposite,
)
from cfsim.diagnostics import ConfigWarning
from cfsim.logging import Stopwatch, get_logger
from cfsim.measures import Measure, MeasureContext, lookup_measure, measure_names
from cfsim.stats import RatingStats, compute_item_stats, compute_user_stats

_log = get_logger(__name__)


def _default_measure() -> str:
    return cfsim_config().similarity.measure


def _default_support_cache() -> bool:
    return cfsim_config().similarity.support_cache


class SimilarityConfig(BaseModel, frozen=True, extra="forbid"):
    "Configuration for :class:`SimilarityEngine`."

    measure: str = Field(default_factory=_default_measure)
    """
    The name of the active measure.  Defaults to the process-wide setting,
    which is ``cosine`` unless configured otherwise.
    """
    orientation: Literal["user", "item"] = "user"
    """
    The kind of entity whose rating vectors are compared.  With ``user``,
    fields are items: per-field statistics are item statistics and columns are
    item vectors.
    """
    support_cache: bool = Field(default_factory=_default_support_cache)
    """
    Whether to memoize pair similarities by vector IDs.
    """
    cosine_normalized: bool = Field(
        False, validation_alias=AliasChoices("cosine_normalized", "cos_normalized")
    )
    "Center cosine on the rating median."
    msd_fraction: bool = False
    "Use the fraction form of MSD instead of the range-normalized form."
    value_bins: str = "1,2,3,4,5"
    """
    Comma-separated list of discrete rating values, used by the bin-counting
    measures.  If empty, bins are taken from the ratings being compared.
    """
    bcf_median_mode: bool = Field(
        True, validation_alias=AliasChoices("bcf_median_mode", "bcf_median")
    )
    "Center BCF column modules on the rating median rather than column means."
    mu_alpha: float = 0.5
    "Weight of Pearson correlation in the Mu measure."
    smtp_lambda: float = 0.5
    "Penalty for fields rated zero by only one side in SMTP."
    smtp_general_var: bool = False
    "Use the global rating variance in SMTP instead of per-field variances."
    ta_normalized: bool = False
    "Normalize the triangle area measure."

    @field_validator("value_bins", mode="after")
    @staticmethod
    def check_value_bins(text: str) -> str:
        parse_value_bins(text)
        return text

    @property
    def bins(self) -> list[float]:
        "The parsed value bins."
        return parse_value_bins(self.value_bins)


@dataclass
class SimilaritySession:
    """
    State computed for a dataset between :meth:`SimilarityEngine.setup` and
    :meth:`SimilarityEngine.unsetup`.  Everything here is discarded together.
    """

    dataset: Dataset
    user_stats: RatingStats
    item_stats: RatingStats
    context: MeasureContext
    row_sims: PairCache[float]

    def caches(self) -> list[KeyedCache[Any, float]]:
        ctx = self.context
        return [
            c
            for c in [self.row_sims, ctx.column_bc, ctx.column_corr, ctx.column_modules]
            if c is not None
        ]


class SimilarityEngine(Component[float]):
    """
    Computes similarity between two rating vectors with a configurable
    measure.

    An engine must be set up with a dataset before use; setup scans the data
    to compute the global, per-user, and per-item rating statistics that
    several measures depend on.  Similarities that cannot be computed (empty
    overlaps, zero variance, unknown measures, missing parameters) are
    reported as :data:`~cfsim.data.UNUSED`, never as exceptions.

    A set-up engine is safe to query from multiple threads.  Setup and teardown
    are serialized by a lock; a query reads the session current when it
    starts and finishes against it even if the engine is torn down meanwhile.

    Stability:
        Caller
    """

    config: SimilarityConfig

    _lock: threading.RLock
    _session: SimilaritySession | None = None
    _measure: Measure | None

    def __init__(self, config: SimilarityConfig | None = None, **kwargs):
        super().__init__(config, **kwargs)
        self._lock = threading.RLock()
        self._measure = lookup_measure(self.config.measure)
        if self._measure is None:
            _log.warning("unknown similarity measure", measure=self.config.measure)
            warnings.warn(f"unknown similarity measure {self.config.measure}", ConfigWarning)

    @property
    def measure(self) -> Measure | None:
        "The active measure, or ``None`` if its name is not registered."
        return self._measure

    @property
    def is_setup(self) -> bool:
        return self._current() is not None

    def setup(self, dataset: Dataset, columns: ColumnAccessor | None = None):
        """
        Prepare the engine to compute similarities over a dataset.  Any
        existing session is discarded first.

        Args:
            dataset:
                The rating data.
            columns:
                Source of column vectors for measures that need them.  If not
                supplied, columns are read from ``dataset``.
        """
        with self._lock:
            if self._session is not None:
                self.unsetup()

            log = _log.bind(measure=self.config.measure, orientation=self.config.orientation)
            timer = Stopwatch()
            log.info("setting up similarity engine")

            user_stats = compute_user_stats(dataset)
            item_stats = compute_item_stats(dataset)
            fields = item_stats if self.config.orientation == "user" else user_stats
            rows = user_stats if self.config.orientation == "user" else item_stats

            value_bins = self.config.bins
            if columns is None:
                columns = DatasetColumns(dataset, opposite(self.config.orientation))

            ctx = MeasureContext(
                config=self.config,
                data_config=dataset.config,
                rating_mean=rows.rating_mean,
                rating_var=rows.rating_var,
                field_means=fields.means,
                field_vars=fields.variances,
                field_ids=frozenset(fields.means.keys()),
                value_bins=value_bins,
                rank_bins=to_rank_bins(value_bins),
                columns=columns,
                column_bc=PairCache("column-bc"),
                column_corr=PairCache("column-corr"),
                column_modules=KeyedCache("column-modules"),
            )
            self._session = SimilaritySession(
                dataset, user_stats, item_stats, ctx, PairCache("row-similarity")
            )
            log.info(
                "similarity engine ready in %s",
                timer,
                n_users=len(user_stats),
                n_items=len(item_stats),
                n_ratings=rows.n_ratings,
            )

    def unsetup(self):
        """
        Discard all statistics and cached results.  Safe to call when the
        engine is not set up.

        The session is dropped, not emptied: queries still running against it
        finish with its statistics and caches intact, and nothing reaches the
        session once they are done.
        """
        with self._lock:
            session = self._session
            if session is None:
                return
            self._session = None
        _log.debug(
            "similarity engine torn down",
            measure=self.config.measure,
            n_cached=sum(len(c) for c in session.caches()),
        )

    @staticmethod
    def supported_measures() -> list[str]:
        "Get the sorted names of all supported measures."
        return measure_names()

    def requires_bins(self) -> bool:
        "Query whether the active measure counts ratings in value bins."
        return self._measure is not None and self._measure.needs_bins

    def similarity(
        self,
        v1: RatingVector,
        v2: RatingVector,
        p1: Profile | None = None,
        p2: Profile | None = None,
        *params: Any,
    ) -> float:
        """
        Compute the similarity between two rating vectors with the active
        measure.

        Args:
            v1:
                The first rating vector.
            v2:
                The second rating vector.
            p1:
                The first entity's profile, if any.
            p2:
                The second entity's profile, if any.
            params:
                Extra measure parameters (e.g. the fixed column ID for
                ``pc``).

        Returns:
            The similarity, or :data:`~cfsim.data.UNUSED` if it is undefined.

        Raises:
            RuntimeError: if the engine has not been set up.
        """
        session = self._current()
        if session is None:
            raise RuntimeError("similarity engine is not set up")

        meas = self._measure
        if meas is None:
            _log.debug("unknown measure", measure=self.config.measure)
            return UNUSED

        ctx = session.context
        if not (self.config.support_cache and meas.cacheable):
            return meas(ctx, v1, v2, p1, p2, *params)

        return session.row_sims.get_or_compute_pair(
            v1.id, v2.id, lambda: meas(ctx, v1, v2, p1, p2, *params)
        )

    @override
    def __call__(
        self,
        v1: RatingVector,
        v2: RatingVector,
        p1: Profile | None = None,
        p2: Profile | None = None,
        *params: Any,
    ) -> float:
        return self.similarity(v1, v2, p1, p2, *params)

    @property
    def row_cache(self) -> PairCache[float] | None:
        "The pair similarity cache of the current session."
        session = self._current()
        return session.row_sims if session is not None else None

    @property
    def rating_mean(self) -> float:
        session = self._current()
        return session.context.rating_mean if session is not None else UNUSED

    @property
    def rating_var(self) -> float:
        session = self._current()
        return session.context.rating_var if session is not None else UNUSED

    @property
    def rating_median(self) -> float:
        session = self._current()
        return session.context.rating_median if session is not None else UNUSED

    @property
    def user_means(self) -> dict[int, float]:
        session = self._current()
        return session.user_stats.means if session is not None else {}

    @property
    def user_vars(self) -> dict[int, float]:
        session = self._current()
        return session.user_stats.variances if session is not None else {}

    @property
    def item_means(self) -> dict[int, float]:
        session = self._current()
        return session.item_stats.means if session is not None else {}

    @property
    def item_vars(self) -> dict[int, float]:
        session = self._current()
        return session.item_stats.variances if session is not None else {}

    @property
    def value_bins(self) -> list[float]:
        session = self._current()
        return list(session.context.value_bins) if session is not None else []

    @property
    def rank_bins(self) -> dict[float, int]:
        session = self._current()
        return dict(session.context.rank_bins) if session is not None else {}

    def _current(self) -> SimilaritySession | None:
        with self._lock:
            return self._session

    def __str__(self) -> str:
        return f"SimilarityEngine({self.config.measure})"
