# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Restartable cursors over dataset entities.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

T = TypeVar("T")


class Fetcher(ABC, Generic[T]):
    """
    Cursor over a (possibly remote) sequence of entities.  A fetcher starts
    positioned before its first element; :meth:`advance` moves to the next
    one.  Fetchers can be restarted, and must be closed when no longer needed.
    Iterating a fetcher restarts it and yields every element, including
    ``None`` placeholders.
    """

    @abstractmethod
    def advance(self) -> bool:
        """
        Move to the next element.

        Returns:
            ``True`` if there is a current element after moving.
        """
        ...

    @abstractmethod
    def current(self) -> T | None:
        "Get the current element."
        ...

    @abstractmethod
    def restart(self) -> None:
        "Move back to before the first element."
        ...

    @abstractmethod
    def close(self) -> None:
        "Release the fetcher's resources."
        ...

    def __iter__(self) -> Iterator[T | None]:
        self.restart()
        while self.advance():
            yield self.current()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class ListFetcher(Fetcher[T]):
    """
    Fetcher over an in-memory list.
    """

    _items: list[T | None]
    _pos: int
    closed: bool = False

    def __init__(self, items: Iterable[T | None]):
        self._items = list(items)
        self._pos = -1

    def advance(self) -> bool:
        if self.closed:
            raise RuntimeError("fetcher is closed")
        if self._pos < len(self._items):
            self._pos += 1
        return self._pos < len(self._items)

    def current(self) -> T | None:
        if 0 <= self._pos < len(self._items):
            return self._items[self._pos]
        return None

    def restart(self) -> None:
        if self.closed:
            raise RuntimeError("fetcher is closed")
        self._pos = -1

    def close(self) -> None:
        self.closed = True

    def __len__(self) -> int:
        return len(self._items)
