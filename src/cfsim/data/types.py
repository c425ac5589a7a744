# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Basic types and the “unused” sentinel.
"""

from __future__ import annotations

import math
from typing import Literal, TypeAlias

import numpy as np

UNUSED: float = float(np.finfo(np.float64).max)
"""
Sentinel meaning “not computable”.  Similarity measures return this instead
of raising or producing NaN when their inputs are degenerate (no common
fields, zero variance, and so on), so callers can treat it as “no opinion”.
"""

EntityType: TypeAlias = Literal["user", "item"]
"The two kinds of entity that own rating vectors."


def is_used(value: float | None) -> bool:
    """
    Check whether a value is a real result (not ``None``, NaN, or
    :data:`UNUSED`).
    """
    if value is None:
        return False
    value = float(value)
    return value != UNUSED and not math.isnan(value)


def opposite(entity: EntityType) -> EntityType:
    "Get the other entity type."
    return "item" if entity == "user" else "user"
