# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Rich console output for log records and command-line results.
"""

from datetime import datetime
from logging import Handler, LogRecord
from typing import Any

from rich.ansi import AnsiDecoder
from rich.console import Console
from structlog.typing import EventDict

console = Console(stderr=True)


class ConsoleHandler(Handler):
    """
    Logging handler that prints structlog-formatted records on the Rich
    console.
    """

    _decoder = AnsiDecoder()

    @property
    def supports_color(self) -> bool:
        return console.is_terminal and not console.no_color

    def emit(self, record: LogRecord) -> None:
        try:
            fmt = self.format(record)
            console.print(*self._decoder.decode(fmt))
        except Exception:
            self.handleError(record)


def remove_internal(logger: Any, method: str, event_dict: EventDict) -> EventDict:
    """
    Drop attributes whose names begin with ``_`` before rendering.
    """
    return {k: v for k, v in event_dict.items() if not k.startswith("_")}


def format_timestamp(logger: Any, method: str, event_dict: EventDict) -> EventDict:
    """
    Render UNIX timestamps as ISO strings.
    """
    if "timestamp" in event_dict:
        stamp = datetime.fromtimestamp(event_dict["timestamp"])
        return event_dict | {"timestamp": stamp.isoformat(timespec="seconds")}
    else:
        return event_dict
