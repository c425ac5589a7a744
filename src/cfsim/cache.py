# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Single-flight memoization of similarity and column computations.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

from cfsim.logging import get_logger

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
_log = get_logger(__name__)


class _Slot(Generic[V]):
    """
    A cache entry that is either filled or still being computed.
    """

    __slots__ = ("done", "value", "error")

    done: threading.Event
    value: V | None
    error: BaseException | None

    def __init__(self):
        self.done = threading.Event()
        self.value = None
        self.error = None

    def wait(self) -> V:
        self.done.wait()
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore


class KeyedCache(Generic[K, V]):
    """
    Unbounded memo table that computes each key at most once.

    When several threads ask for the same missing key, the first one runs the
    computation and the others block until it finishes and then receive its
    result.  Different keys are computed concurrently.  If the computation
    raises, nothing is stored, all waiting callers see the exception, and the
    next request for the key tries again.

    Entries are never evicted; the cache lives as long as the session that
    owns it.  Clearing the cache does not disturb computations in flight:
    their callers still receive their results, which are not stored.

    Args:
        name:
            Name used in log messages.
    """

    name: str
    hits: int
    misses: int
    _lock: threading.Lock
    _slots: dict[K, _Slot[V]]

    def __init__(self, name: str = "cache"):
        self.name = name
        self.hits = 0
        self.misses = 0
        self._lock = threading.Lock()
        self._slots = {}

    def get_or_compute(self, key: K, compute: Callable[[], V]) -> V:
        """
        Get the value for ``key``, calling ``compute`` to produce it if it has
        not been cached.
        """
        with self._lock:
            slot = self._slots.get(key, None)
            if slot is None:
                slot = _Slot()
                self._slots[key] = slot
                owner = True
                self.misses += 1
            else:
                owner = False
                self.hits += 1

        if not owner:
            return slot.wait()

        try:
            value = compute()
        except BaseException as e:
            with self._lock:
                # the cache may have been cleared and the key claimed anew
                if self._slots.get(key, None) is slot:
                    del self._slots[key]
            slot.error = e
            slot.done.set()
            raise

        slot.value = value
        slot.done.set()
        return value

    def get(self, key: K, default: V | None = None) -> V | None:
        """
        Get a completed value without computing it.
        """
        with self._lock:
            slot = self._slots.get(key, None)
        if slot is None or not slot.done.is_set() or slot.error is not None:
            return default
        return slot.value

    def __contains__(self, key: object) -> bool:
        with self._lock:
            slot = self._slots.get(key, None)  # type: ignore
        return slot is not None and slot.done.is_set()

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def clear(self):
        with self._lock:
            n = len(self._slots)
            self._slots.clear()
            self.hits = 0
            self.misses = 0
        _log.debug("cleared cache", cache=self.name, n_entries=n)

    def __repr__(self) -> str:
        return "<{} {}: {} entries, {} hits, {} misses>".format(
            self.__class__.__name__, self.name, len(self), self.hits, self.misses
        )


class PairCache(KeyedCache[tuple[int, int], V]):
    """
    Single-flight cache keyed by an ordered pair of IDs.  ``(a, b)`` and
    ``(b, a)`` are separate entries; callers that want symmetric sharing must
    order the IDs themselves.
    """

    def get_or_compute_pair(self, id1: int, id2: int, compute: Callable[[], V]) -> V:
        return self.get_or_compute((id1, id2), compute)


def cache_or_compute(cache: KeyedCache[K, V] | None, key: K, compute: Callable[[], V]) -> V:
    """
    Memoize ``compute`` under ``key`` in ``cache``, or just call it when there
    is no cache.
    """
    if cache is None:
        return compute()
    return cache.get_or_compute(key, compute)
