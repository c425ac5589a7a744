# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
cfsim test harnesses and utilities.

This package contains utility code for testing cfsim and code built on it.
It relies on PyTest and Hypothesis.
"""

import os
from contextlib import contextmanager

from ._components import BasicComponentTests
from ._data import sample_ds, sample_ratings, sample_vectors
from ._strategies import rating_maps, rating_vector_pairs, rating_vectors

__all__ = [
    "BasicComponentTests",
    "rating_maps",
    "rating_vectors",
    "rating_vector_pairs",
    "sample_ds",
    "sample_ratings",
    "sample_vectors",
    "set_env_var",
]


@contextmanager
def set_env_var(var, val):
    "Set an environment variable & restore it."
    old_val = os.environ.get(var, None)
    try:
        if val is None:
            if old_val is not None:
                del os.environ[var]
        else:
            os.environ[var] = val
        yield
    finally:
        if old_val is not None:
            os.environ[var] = old_val
        elif val is not None:
            del os.environ[var]
