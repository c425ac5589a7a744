# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

from pytest import fixture

from cfsim.data import MemoryDataset, RatingVector
from cfsim.engine import SimilarityEngine


@fixture
def sim(sample_ds: MemoryDataset):
    """
    Fixture returning a function that computes a measure between two users of
    the sample data.
    """
    engines: dict[tuple, SimilarityEngine] = {}

    def compute(measure: str, u1: int | RatingVector, u2: int | RatingVector, *params, **config):
        key = (measure, tuple(sorted(config.items())))
        eng = engines.get(key, None)
        if eng is None:
            eng = SimilarityEngine(measure=measure, **config)
            eng.setup(sample_ds)
            engines[key] = eng

        v1 = u1 if isinstance(u1, RatingVector) else sample_ds.user_rating(u1)
        v2 = u2 if isinstance(u2, RatingVector) else sample_ds.user_rating(u2)
        assert v1 is not None and v2 is not None
        return eng.similarity(v1, v2, None, None, *params)

    yield compute

    for eng in engines.values():
        eng.unsetup()
