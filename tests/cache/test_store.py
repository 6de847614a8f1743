"""Tests for the cache store: memoization, negative entries, reset, LRU bound."""

import threading
from unittest.mock import MagicMock

import pytest

from reflectcache.cache.store import TABLE_NAMES, CacheStore, LRUTable


def test_factory_runs_once_per_key(store):
    factory = MagicMock(return_value="value")

    first = store.get_or_create("types", "a", factory)
    second = store.get_or_create("types", "a", factory)

    assert first == second == "value"
    assert factory.call_count == 1


def test_none_is_cached(store):
    """CRITICAL: Not-found results are cached like found ones.

    Why: Repeated misses must not repeat the expensive live lookup.
    """
    factory = MagicMock(return_value=None)

    assert store.get_or_create("fields", "missing", factory) is None
    assert store.get_or_create("fields", "missing", factory) is None
    assert factory.call_count == 1
    assert store.contains("fields", "missing")


def test_tables_are_independent(store):
    store.get_or_create("types", "k", lambda: 1)
    assert store.get_or_create("fields", "k", lambda: 2) == 2


def test_factory_exception_is_not_cached(store):
    def fail():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        store.get_or_create("types", "k", fail)

    assert not store.contains("types", "k")
    assert store.get_or_create("types", "k", lambda: "ok") == "ok"


def test_clear_all_empties_every_table(store):
    for name in TABLE_NAMES:
        store.get_or_create(name, "k", lambda: 1)
    assert all(size == 1 for size in store.sizes().values())

    store.clear_all()

    assert all(size == 0 for size in store.sizes().values())


def test_clear_all_forces_recomputation(store):
    factory = MagicMock(side_effect=[object(), object()])

    before = store.get_or_create("getters", "k", factory)
    store.clear_all()
    after = store.get_or_create("getters", "k", factory)

    assert before is not after
    assert factory.call_count == 2


def test_first_writer_wins_under_contention(store):
    """CRITICAL: Concurrent misses on one key all observe one canonical value.

    Why: Compiled accessors are compared by identity by callers.
    """
    barrier = threading.Barrier(8)
    results: list[object] = []
    lock = threading.Lock()

    def factory():
        barrier.wait()  # Every thread misses before any inserts
        return object()

    def worker():
        value = store.get_or_create("getters", "shared", factory)
        with lock:
            results.append(value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_reset_during_reads_never_exposes_partial_state(store):
    """A reader sees either the old entry or a fresh miss, never an error."""
    stop = threading.Event()
    errors: list[BaseException] = []

    def reader():
        try:
            while not stop.is_set():
                assert store.get_or_create("types", "k", lambda: "v") == "v"
        except BaseException as e:  # noqa: BLE001 - surfaced through the assertion below
            errors.append(e)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for _ in range(200):
        store.clear_all()
    stop.set()
    for t in threads:
        t.join()

    assert errors == []


class TestLRU:
    def test_max_entries_must_be_positive(self):
        with pytest.raises(ValueError):
            CacheStore(max_entries=0)

    def test_least_recently_used_entry_is_evicted(self):
        store = CacheStore(max_entries=2)
        store.get_or_create("types", "a", lambda: 1)
        store.get_or_create("types", "b", lambda: 2)
        store.get_or_create("types", "a", lambda: 1)  # touch a
        store.get_or_create("types", "c", lambda: 3)

        assert store.contains("types", "a")
        assert not store.contains("types", "b")
        assert store.contains("types", "c")
        assert store.sizes()["types"] == 2

    def test_lru_table_setdefault_returns_existing(self):
        table = LRUTable(max_entries=4)
        assert table.setdefault("k", 1) == 1
        assert table.setdefault("k", 2) == 1
        assert len(table) == 1
