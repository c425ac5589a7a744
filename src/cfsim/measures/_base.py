# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Measure registry and shared formula helpers.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

import numpy as np
from numpy.typing import NDArray

from cfsim.cache import KeyedCache, PairCache
from cfsim.data import UNUSED, ColumnAccessor, DataConfig, Profile, RatingVector, is_used

if TYPE_CHECKING:  # pragma: nocover
    from cfsim.engine import SimilarityConfig


@dataclass(frozen=True)
class MeasureContext:
    """
    Everything a measure can read besides the two vectors being compared:
    the engine configuration, the statistics computed at setup, the bins, and
    the column accessor with its caches.  Measures never modify it.

    “Fields” are the entities on the opposite axis from the vectors being
    compared: items when users are compared, users when items are.
    """

    config: SimilarityConfig
    data_config: DataConfig
    rating_mean: float = UNUSED
    rating_var: float = UNUSED
    field_means: Mapping[int, float] = field(default_factory=dict)
    field_vars: Mapping[int, float] = field(default_factory=dict)
    field_ids: frozenset[int] = frozenset()
    value_bins: list[float] = field(default_factory=list)
    rank_bins: dict[float, int] = field(default_factory=dict)
    columns: ColumnAccessor | None = None
    column_bc: PairCache[float] | None = None
    column_corr: PairCache[float] | None = None
    column_modules: KeyedCache[int, float] | None = None

    @property
    def rating_median(self) -> float:
        return self.data_config.rating_median


MeasureFunc: TypeAlias = Callable[..., float]
"""
Signature of a measure implementation::

    func(ctx, v1, v2, p1=None, p2=None, *params) -> float
"""


@dataclass(frozen=True)
class Measure:
    """
    A registered similarity measure.

    Attributes:
        name:
            The name used to select the measure.
        func:
            The implementation.
        cacheable:
            Whether the result depends only on the two vectors, so it can be
            memoized by their IDs.
        needs_bins:
            Whether the measure counts ratings in value bins.
        needs_columns:
            Whether the measure reads column vectors.
    """

    name: str
    func: MeasureFunc = field(compare=False)
    cacheable: bool = True
    needs_bins: bool = False
    needs_columns: bool = False

    def __call__(
        self,
        ctx: MeasureContext,
        v1: RatingVector,
        v2: RatingVector,
        p1: Profile | None = None,
        p2: Profile | None = None,
        *params: Any,
    ) -> float:
        return self.func(ctx, v1, v2, p1, p2, *params)


_registry: dict[str, Measure] = {}


def measure(
    name: str, *, cacheable: bool = True, needs_bins: bool = False, needs_columns: bool = False
) -> Callable[[MeasureFunc], MeasureFunc]:
    """
    Decorator registering a function as a named measure.
    """

    def register(func: MeasureFunc) -> MeasureFunc:
        if name in _registry:
            raise ValueError(f"measure {name} already registered")
        _registry[name] = Measure(name, func, cacheable, needs_bins, needs_columns)
        return func

    return register


def lookup_measure(name: str) -> Measure | None:
    "Find a measure by name, returning ``None`` for unknown names."
    return _registry.get(name, None)


def measure_names() -> list[str]:
    "Get the sorted names of all registered measures."
    return sorted(_registry.keys())


def deviation_cosine(dx: NDArray[np.float64], dy: NDArray[np.float64]) -> float:
    """
    Cosine of two deviation vectors, or :data:`UNUSED` if either is all zero.
    """
    vx = float(np.dot(dx, dx))
    vy = float(np.dot(dy, dy))
    if vx == 0 or vy == 0:
        return UNUSED
    return float(np.dot(dx, dy)) / math.sqrt(vx * vy)


def with_field_means(
    ctx: MeasureContext, ids: NDArray[np.int64], x: NDArray[np.float64], y: NDArray[np.float64]
) -> tuple[NDArray[np.int64], NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """
    Restrict common fields to those with a known field mean, and look up the
    means.
    """
    means = np.array([ctx.field_means.get(int(f), np.nan) for f in ids], dtype=np.float64)
    known = ~np.isnan(means)
    return ids[known], x[known], y[known], means[known]


def logistic(x: float) -> float:
    "The logistic function :math:`1 / (1 + e^{-x})`."
    if x < -700:
        return 0.0
    return 1.0 / (1.0 + math.exp(-x))


def product(*values: float) -> float:
    "Multiply measure values, propagating :data:`UNUSED`."
    result = 1.0
    for v in values:
        if not is_used(v):
            return UNUSED
        result *= v
    return result


def total(*values: float) -> float:
    "Add measure values, propagating :data:`UNUSED`."
    result = 0.0
    for v in values:
        if not is_used(v):
            return UNUSED
        result += v
    return result
