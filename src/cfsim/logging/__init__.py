# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Logging configuration and timing support.
"""

from ._console import console
from ._proxy import get_logger
from .config import LoggingConfig, basic_logging
from .stopwatch import Stopwatch

__all__ = [
    "LoggingConfig",
    "basic_logging",
    "console",
    "get_logger",
    "Stopwatch",
]
