# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

import structlog

from hypothesis import settings
from pytest import fixture

from cfsim.config import reset_config

# bring common fixtures into scope
from cfsim.testing import sample_ds, sample_ratings, sample_vectors  # noqa: F401

_log = structlog.stdlib.get_logger("cfsim.tests")

structlog.configure(
    [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.MaybeTimeStamper(fmt="iso"),
        structlog.processors.KeyValueRenderer(key_order=["timestamp", "event"]),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


@fixture(autouse=True)
def log_test(request):
    try:
        modname = request.module.__name__ if request.module else "<unknown>"
    except Exception:
        modname = "<unknown>"
    funcname = request.function.__name__ if request.function else "<unknown>"
    _log.info("running test %s:%s", modname, funcname)


@fixture(autouse=True)
def clean_config():
    reset_config()
    yield
    reset_config()


settings.register_profile("default", deadline=1000)
