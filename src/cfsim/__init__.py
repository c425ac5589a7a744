# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Similarity measures for neighborhood collaborative filtering.
"""

import lazy_loader as lazy

from ._version import cfsim_version

__version__ = cfsim_version()


# IMPORTANT: this must be kept in sync with __init__.pyi
__getattr__, __dir__, __all__ = lazy.attach(
    __name__,
    submodules=[
        "bins",
        "cache",
        "config",
        "data",
        "engine",
        "logging",
        "measures",
        "stats",
    ],
    submod_attrs={
        "config": ["configure", "cfsim_config"],
        "data": ["RatingVector", "MemoryDataset", "UNUSED", "is_used"],
        "engine": ["SimilarityEngine", "SimilarityConfig"],
    },
)
