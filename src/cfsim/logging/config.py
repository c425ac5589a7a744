# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Logging pipeline configuration.
"""

from __future__ import annotations

import logging
import os
import re
import warnings
from pathlib import Path

import structlog

from ._console import ConsoleHandler, format_timestamp, remove_internal

CORE_PROCESSORS = [
    structlog.processors.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.MaybeTimeStamper(),
]

_active_config: LoggingConfig | None = None


def active_logging_config() -> LoggingConfig | None:
    """
    Get the currently-active logging configuration.
    """
    return _active_config


def basic_logging(level: int = logging.INFO):
    """
    Simple one-function logging configuration for scripts and command lines.
    """
    cfg = LoggingConfig()
    cfg.level = level
    cfg.apply()


class LoggingConfig:  # pragma: nocover
    """
    Configuration for cfsim logging.

    This is a convenience for applications that want a reasonable console (and
    optionally file) logging setup.  If it is never applied, cfsim emits its
    messages to :mod:`structlog` and :mod:`logging`, which can be configured
    any other way.

    The ``CFSIM_LOG_LEVEL``, ``CFSIM_LOG_FILE`` and ``CFSIM_LOG_FILE_LEVEL``
    environment variables provide the initial values.
    """

    level: int = logging.INFO
    file: Path | None = None
    file_level: int | None = None

    def __init__(self):
        if ev_level := _env_level("CFSIM_LOG_LEVEL"):
            self.level = ev_level

        if ev_file := os.environ.get("CFSIM_LOG_FILE", None):
            self.file = Path(ev_file)

        if ev_level := _env_level("CFSIM_LOG_FILE_LEVEL"):
            self.file_level = ev_level

    @property
    def effective_level(self) -> int:
        if self.file_level is not None and self.file_level < self.level:
            return self.file_level
        else:
            return self.level

    def set_verbose(self, verbose: bool = True):
        """
        Enable (or disable) DEBUG-level logging.
        """
        if verbose:
            self.level = logging.DEBUG
        else:
            self.level = logging.INFO

    def log_file(self, path: os.PathLike[str], level: int | None = None):
        """
        Configure a JSON log file.
        """
        self.file = Path(path)
        self.file_level = level

    def apply(self):
        """
        Apply the configuration.
        """
        global _active_config

        root = logging.getLogger()
        term = ConsoleHandler()
        term.setLevel(self.level)

        structlog.configure(
            processors=CORE_PROCESSORS + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            wrapper_class=structlog.make_filtering_bound_logger(self.effective_level),
            logger_factory=structlog.stdlib.LoggerFactory(),
        )
        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                remove_internal,
                format_timestamp,
                structlog.dev.ConsoleRenderer(colors=term.supports_color),
            ],
            foreign_pre_chain=CORE_PROCESSORS,
        )

        term.setFormatter(formatter)
        root.addHandler(term)

        if self.file:
            file_level = self.file_level if self.file_level is not None else self.level
            file = logging.FileHandler(self.file, mode="w")
            ffmt = structlog.stdlib.ProcessorFormatter(
                processors=[
                    remove_internal,
                    structlog.processors.ExceptionPrettyPrinter(),
                    structlog.processors.JSONRenderer(),
                ],
                foreign_pre_chain=CORE_PROCESSORS,
            )
            file.setFormatter(ffmt)
            file.setLevel(file_level)
            root.addHandler(file)

        root.setLevel(self.effective_level)

        _active_config = self


def _env_level(name: str) -> int | None:
    ev_level = os.environ.get(name, None)
    if ev_level:
        ev_level = ev_level.strip().upper()
        lmap = logging.getLevelNamesMapping()
        if re.match(r"^\d+$", ev_level):
            return int(ev_level)
        elif ev_level in lmap:
            return lmap[ev_level]
        else:
            warnings.warn(f"{name} set to invalid value {ev_level}")
    return None
