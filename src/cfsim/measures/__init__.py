# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Similarity measures.  Each measure is a function registered under a name with
:func:`measure`; importing this package registers all built-in measures.
"""

from ._base import (
    Measure,
    MeasureContext,
    MeasureFunc,
    lookup_measure,
    measure,
    measure_names,
)

# import the families for their registrations
from . import correlation, cosine, distance, divergence, overlap, presence, shape  # noqa: F401  # isort: skip
from . import composite  # noqa: F401  # isort: skip

__all__ = [
    "Measure",
    "MeasureContext",
    "MeasureFunc",
    "lookup_measure",
    "measure",
    "measure_names",
]
