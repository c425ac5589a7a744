# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Data abstractions consumed by the similarity engine.
"""

from .columns import ColumnAccessor, DatasetColumns, MappingColumns
from .dataset import DataConfig, Dataset, MemoryDataset
from .fetcher import Fetcher, ListFetcher
from .profile import Attribute, AttributeList, AttributeType, Profile
from .types import UNUSED, EntityType, is_used, opposite
from .vectors import RatingVector

__all__ = [
    "UNUSED",
    "is_used",
    "opposite",
    "EntityType",
    "RatingVector",
    "Profile",
    "Attribute",
    "AttributeList",
    "AttributeType",
    "Fetcher",
    "ListFetcher",
    "DataConfig",
    "Dataset",
    "MemoryDataset",
    "ColumnAccessor",
    "DatasetColumns",
    "MappingColumns",
]
