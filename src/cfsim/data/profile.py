# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Entity attribute profiles.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np


class AttributeType(Enum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    NOMINAL = "nominal"


@dataclass(frozen=True)
class Attribute:
    """
    A single attribute of a profile schema.  Nominal attributes carry the list
    of their permitted values.
    """

    name: str
    type: AttributeType = AttributeType.NUMERIC
    values: tuple[str, ...] = ()
    key: bool = False


@dataclass(frozen=True)
class AttributeList:
    "A fixed profile schema."

    attributes: tuple[Attribute, ...]

    def __len__(self) -> int:
        return len(self.attributes)

    def __getitem__(self, i: int) -> Attribute:
        return self.attributes[i]

    def index(self, name: str) -> int:
        for i, att in enumerate(self.attributes):
            if att.name == name:
                return i
        raise KeyError(name)


@dataclass(frozen=True)
class Profile:
    """
    Attribute profile of a user or item.  Profiles are optional inputs to the
    similarity engine; ``None`` is always acceptable in their place.
    """

    schema: AttributeList
    data: tuple[Any, ...] = field(default=())

    @classmethod
    def create(cls, schema: AttributeList | Sequence[Attribute], values: Mapping[str, Any]):
        if not isinstance(schema, AttributeList):
            schema = AttributeList(tuple(schema))
        return cls(schema, tuple(values.get(a.name, None) for a in schema.attributes))

    def is_missing(self, i: int) -> bool:
        return i >= len(self.data) or self.data[i] is None

    def value(self, name: str) -> Any:
        i = self.schema.index(name)
        return None if self.is_missing(i) else self.data[i]

    def numeric_values(self) -> np.ndarray:
        """
        Convert the non-key attributes to floats.  Nominal values become their
        position in the attribute's value list, normalized to [0, 1]; missing
        values become NaN.
        """
        out = []
        for i, att in enumerate(self.schema.attributes):
            if att.key:
                continue
            if self.is_missing(i):
                out.append(np.nan)
            elif att.type == AttributeType.NOMINAL and att.values:
                pos = att.values.index(str(self.data[i]))
                out.append(pos / max(len(att.values) - 1, 1))
            else:
                out.append(float(self.data[i]))
        return np.array(out, dtype=np.float64)
