# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

import logging
import re
from typing import Any

import structlog
from structlog._config import BoundLoggerLazyProxy

_fallback_wrapper = structlog.make_filtering_bound_logger(logging.WARNING)


def get_logger(
    name: str, *, remove_private: bool = True, **init_vals: Any
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger.  This works like :func:`structlog.stdlib.get_logger`, except
    the returned proxy logger only emits WARNING and higher messages until
    structlog has been configured, so importing cfsim into an application that
    does not set up logging stays quiet.  Modules in cfsim should obtain their
    loggers here rather than from structlog directly.

    Private module components are dropped from the logger name, so
    ``cfsim.measures._base`` logs as ``cfsim.measures``.

    Args:
        name:
            The logger name.
        remove_private:
            Set to ``False`` to keep private module components of the name.
        init_vals:
            Initial values to bind into the logger.
    """
    if remove_private:
        name = re.sub(r"\._.*", "", name)
    return SimProxyLogger(None, logger_factory_args=[name], initial_values=init_vals)  # type: ignore


class SimProxyLogger(BoundLoggerLazyProxy):
    """
    Lazy proxy logger that falls back to a filtering logger when structlog is
    not configured.
    """

    def bind(self, **new_values: Any):
        if structlog.is_configured():
            self._wrapper_class = None
        else:
            self._wrapper_class = _fallback_wrapper

        return super().bind(**new_values)
