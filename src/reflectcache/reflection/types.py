"""Type registry: fully-qualified name to class, memoized.

Resolution order on a miss:
    1. builtins (undotted names) and the configured priority scopes
    2. every loaded module, in registration order; first match wins
Found and not-found results are both cached under the exact input string.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from types import ModuleType
from typing import Any

from reflectcache.cache.protocol import Introspector
from reflectcache.cache.store import CacheStore
from reflectcache.core.metadata.models import TypeKey
from reflectcache.core.types import InvalidArgumentError

logger = logging.getLogger(__name__)

type TypePredicate = Callable[[type], bool]


class TypeRegistry:
    """Resolve and enumerate classes through the shared cache store.

    Args:
        store: Cache store holding the ``types`` table.
        introspector: Live lookup facility consulted on a miss.
    """

    def __init__(self, store: CacheStore, introspector: Introspector):
        self._store = store
        self._introspector = introspector

    def resolve(self, name: TypeKey | None) -> type | None:
        """Resolve a fully-qualified type name.

        Args:
            name: Type name such as ``"collections.OrderedDict"`` or ``"int"``.

        Returns:
            The class, or None if absent, empty, or not found anywhere.

        Raises:
            InvalidArgumentError: If name is neither None nor a string.
        """
        if name is None or name == "":
            return None
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Type name must be a string, got {type(name).__name__}")
        return self._store.get_or_create("types", name, lambda: self._lookup(name))

    def _lookup(self, name: str) -> type | None:
        found = self._introspector.find_type(name)
        if found is None:
            logger.debug("Type %r not found in any loaded module", name)
        return found

    def get_types(
        self, module: ModuleType | str | None, predicate: TypePredicate | None = None
    ) -> list[type]:
        """Classes defined in a module, optionally filtered.

        Args:
            module: Module object or the name of a loaded module.
            predicate: Optional filter.

        Returns:
            Matching classes in namespace order.

        Raises:
            InvalidArgumentError: If module is None or names no loaded module.
        """
        if module is None:
            raise InvalidArgumentError("A module is required")
        if isinstance(module, str):
            resolved = self._introspector.find_module(module)
            if resolved is None:
                raise InvalidArgumentError(f"Module {module!r} is not loaded")
            module = resolved
        types = self._introspector.list_types(module)
        return types if predicate is None else [t for t in types if predicate(t)]

    def get_all_types(self, predicate: TypePredicate | None = None) -> Iterator[type]:
        """Classes from every loaded module.

        Modules whose namespace cannot be enumerated are skipped with a warning.

        Args:
            predicate: Optional filter.

        Yields:
            Matching classes, module by module in registration order.
        """
        for module in self._introspector.loaded_modules():
            try:
                types = self._introspector.list_types(module)
            except (TypeError, AttributeError) as e:
                logger.warning("Skipping module %r: cannot enumerate types (%s)", _module_name(module), e)
                continue
            for t in types:
                if predicate is None or predicate(t):
                    yield t


def _module_name(module: Any) -> str:
    return getattr(module, "__name__", repr(module))
