"""In-memory cache store shared by all reflection services.

All tables live in one generation object. Hits are lock-free dict reads;
misses compute outside the lock and insert first-writer-wins under it, so
concurrent misses on the same key all observe one canonical value.
Resetting swaps in a fresh generation, so a reader sees either every old
entry or none of them.

Structure:
    generation.types[type_name]          = type | None
    generation.fields[MemberKey]         = FieldDescriptor | None
    generation.getters[AccessorKey]      = Getter
    generation.invokers[InvokerKey]      = bound callable
    ...

Usage:
    store = CacheStore()
    field = store.get_or_create("fields", key, lambda: introspector.find_field(...))
    store.clear_all()
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import Any, Literal, cast

logger = logging.getLogger(__name__)

type TableName = Literal[
    "types",
    "fields",
    "properties",
    "methods",
    "constructors",
    "method_groups",
    "constructor_groups",
    "getters",
    "setters",
    "factories",
    "invokers",
]

TABLE_NAMES: tuple[TableName, ...] = (
    "types",
    "fields",
    "properties",
    "methods",
    "constructors",
    "method_groups",
    "constructor_groups",
    "getters",
    "setters",
    "factories",
    "invokers",
)

_MISSING = object()


class LRUTable:
    """Bounded table evicting the least recently used entry.

    Every access reorders entries, so callers must hold the store lock.

    Args:
        max_entries: Maximum number of entries kept.
    """

    def __init__(self, max_entries: int):
        self._max_entries = max_entries
        self._entries: OrderedDict[Hashable, Any] = OrderedDict()

    def get(self, key: Hashable, default: Any = None) -> Any:
        value = self._entries.get(key, _MISSING)
        if value is _MISSING:
            return default
        self._entries.move_to_end(key)
        return value

    def setdefault(self, key: Hashable, value: Any) -> Any:
        existing = self.get(key, _MISSING)
        if existing is not _MISSING:
            return existing
        self._entries[key] = value
        if len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted least recently used entry %r", evicted)
        return value

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class CacheGeneration:
    """One complete set of cache tables. Replaced as a whole on reset."""

    __slots__ = TABLE_NAMES

    def __init__(self, max_entries: int | None = None):
        for name in TABLE_NAMES:
            setattr(self, name, {} if max_entries is None else LRUTable(max_entries))

    def table(self, name: TableName) -> dict[Hashable, Any] | LRUTable:
        return cast(dict[Hashable, Any] | LRUTable, getattr(self, name))


class CacheStore:
    """Owner of the cache generation and the insertion lock.

    Args:
        max_entries: Per-table bound; None keeps every entry until reset.
    """

    def __init__(self, max_entries: int | None = None):
        """Initialize cache store.

        Args:
            max_entries: Optional per-table LRU bound (>= 1).

        Raises:
            ValueError: If max_entries is smaller than 1.
        """
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._generation = CacheGeneration(max_entries)

    @property
    def max_entries(self) -> int | None:
        return self._max_entries

    def get_or_create[V](self, table: TableName, key: Hashable, factory: Callable[[], V]) -> V:
        """Return the cached value for key, computing and inserting it on a miss.

        The factory may run more than once under contention; only the first
        inserted value is ever returned. Exceptions from the factory propagate
        and nothing is cached.

        Args:
            table: Name of the table to use.
            key: Hashable lookup key.
            factory: Computes the value on a miss. May return None (negative entry).

        Returns:
            The canonical cached value.
        """
        generation = self._generation
        entries = generation.table(table)
        if self._max_entries is None:
            value = entries.get(key, _MISSING)
        else:
            with self._lock:
                value = entries.get(key, _MISSING)
        if value is not _MISSING:
            return cast(V, value)

        logger.debug("Cache miss in %s for %r", table, key)
        created = factory()
        with self._lock:
            return cast(V, self._generation.table(table).setdefault(key, created))

    def contains(self, table: TableName, key: Hashable) -> bool:
        entries = self._generation.table(table)
        if self._max_entries is None:
            return key in entries
        with self._lock:
            return key in entries

    def sizes(self) -> dict[str, int]:
        """Number of entries per table (diagnostics)."""
        generation = self._generation
        return {name: len(generation.table(name)) for name in TABLE_NAMES}

    def clear_all(self) -> None:
        """Atomically discard every cached entry in every table."""
        with self._lock:
            self._generation = CacheGeneration(self._max_entries)
        logger.debug("Cleared all reflection caches")
