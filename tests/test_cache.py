# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

import threading
import time
from concurrent.futures import ThreadPoolExecutor

from pytest import raises

from cfsim.cache import KeyedCache, PairCache, cache_or_compute


def test_compute_once():
    cache = KeyedCache[str, int]("test")
    calls = []

    def compute():
        calls.append(1)
        return 42

    assert cache.get_or_compute("a", compute) == 42
    assert cache.get_or_compute("a", compute) == 42
    assert len(calls) == 1
    assert cache.hits == 1
    assert cache.misses == 1
    assert "a" in cache
    assert cache.get("a") == 42
    assert cache.get("b") is None
    assert len(cache) == 1


def test_clear():
    cache = KeyedCache[str, int]()
    cache.get_or_compute("a", lambda: 1)
    cache.clear()
    assert len(cache) == 0
    assert "a" not in cache
    assert cache.get_or_compute("a", lambda: 2) == 2


def test_pair_order():
    cache = PairCache[str]()
    assert cache.get_or_compute_pair(1, 2, lambda: "fwd") == "fwd"
    assert cache.get_or_compute_pair(2, 1, lambda: "rev") == "rev"
    assert cache.get_or_compute_pair(1, 2, lambda: "other") == "fwd"
    assert len(cache) == 2


def test_no_cache():
    assert cache_or_compute(None, "a", lambda: 5) == 5
    cache = KeyedCache[str, int]()
    assert cache_or_compute(cache, "a", lambda: 5) == 5
    assert cache_or_compute(cache, "a", lambda: 6) == 5


def test_error_not_stored():
    cache = KeyedCache[str, int]()

    def fail():
        raise ValueError("bad")

    with raises(ValueError):
        cache.get_or_compute("a", fail)
    assert "a" not in cache
    assert len(cache) == 0
    assert cache.get_or_compute("a", lambda: 3) == 3


def test_single_flight():
    cache = PairCache[int]("threads")
    lock = threading.Lock()
    calls = 0
    started = threading.Event()

    def compute():
        nonlocal calls
        with lock:
            calls += 1
        started.set()
        time.sleep(0.1)
        return 7

    with ThreadPoolExecutor(8) as pool:
        futures = [
            pool.submit(cache.get_or_compute_pair, 1, 2, compute) for _i in range(16)
        ]
        results = [f.result() for f in futures]

    assert results == [7] * 16
    assert calls == 1
    assert cache.misses == 1
    assert cache.hits == 15


def test_waiters_see_error():
    cache = KeyedCache[str, int]()
    release = threading.Event()
    entered = threading.Event()

    def slow_fail():
        entered.set()
        release.wait()
        raise RuntimeError("failed")

    errors = []

    def owner():
        try:
            cache.get_or_compute("k", slow_fail)
        except RuntimeError as e:
            errors.append(e)

    def waiter():
        try:
            cache.get_or_compute("k", lambda: 1)
        except RuntimeError as e:
            errors.append(e)

    t1 = threading.Thread(target=owner)
    t1.start()
    entered.wait()
    t2 = threading.Thread(target=waiter)
    t2.start()
    # wait for the waiter to find the pending slot
    while cache.hits < 1:
        time.sleep(0.001)
    release.set()
    t1.join()
    t2.join()

    assert len(errors) == 2
    assert cache.get_or_compute("k", lambda: 9) == 9


def test_clear_while_computing():
    cache = KeyedCache[str, int]()
    old_entered = threading.Event()
    old_release = threading.Event()
    new_entered = threading.Event()
    new_release = threading.Event()
    calls = []

    def failing():
        old_entered.set()
        old_release.wait(5)
        raise ValueError("bad")

    def slow():
        calls.append(1)
        new_entered.set()
        new_release.wait(5)
        return 2

    errors = []
    results = []

    def old_owner():
        try:
            cache.get_or_compute("k", failing)
        except ValueError as e:
            errors.append(e)

    def new_caller():
        results.append(cache.get_or_compute("k", slow))

    t_old = threading.Thread(target=old_owner)
    t_old.start()
    old_entered.wait(5)
    cache.clear()

    # a new owner claims the key while the old computation is still running
    t_new = threading.Thread(target=new_caller)
    t_new.start()
    new_entered.wait(5)

    old_release.set()
    t_old.join()
    assert len(errors) == 1
    assert isinstance(errors[0], ValueError)
    assert len(cache) == 1

    t_wait = threading.Thread(target=new_caller)
    t_wait.start()
    while cache.hits < 1:
        time.sleep(0.001)
    new_release.set()
    t_new.join()
    t_wait.join()

    assert results == [2, 2]
    assert len(calls) == 1
    assert cache.get("k") == 2


def test_clear_keeps_running_result():
    cache = KeyedCache[str, int]()
    entered = threading.Event()
    release = threading.Event()
    results = []

    def slow():
        entered.set()
        release.wait(5)
        return 5

    t = threading.Thread(target=lambda: results.append(cache.get_or_compute("k", slow)))
    t.start()
    entered.wait(5)
    cache.clear()
    release.set()
    t.join()

    assert results == [5]
    assert "k" not in cache
