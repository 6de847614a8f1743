"""Introspector protocol: the live lookups the caches memoize.

Every method performs a fresh query against the type system. Implementations
must not cache; caching is the job of the CacheStore and the services on top
of it. Tests wrap the host implementation to count these calls.

Usage:
    introspector = HostIntrospector(priority_scopes=("myapp.models",))
    cls = introspector.find_type("myapp.models.Point")
    field = introspector.find_field(cls, "x", BindingFlags.ALL)
"""

from __future__ import annotations

from collections.abc import Sequence
from types import ModuleType
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from reflectcache.core.metadata.models import (
        BindingFlags,
        ConstructorDescriptor,
        FieldDescriptor,
        MethodDescriptor,
        PropertyDescriptor,
    )


@runtime_checkable
class Introspector(Protocol):
    """Protocol for live type and member lookups.

    Not-found is always None (or an empty sequence), never an exception.
    """

    # Types

    def find_type(self, name: str) -> type | None:
        """Resolve a fully-qualified type name.

        Args:
            name: Non-empty type name.

        Returns:
            The class if found, None otherwise.
        """
        ...

    def find_module(self, name: str) -> ModuleType | None:
        """Get an already loaded module by name."""
        ...

    def loaded_modules(self) -> Sequence[Any]:
        """Snapshot of loaded modules, in registration order."""
        ...

    def list_types(self, module: Any) -> list[type]:
        """Classes defined in a module.

        Raises:
            TypeError: If the module namespace cannot be enumerated.
        """
        ...

    # Members

    def find_field(self, owner: type, name: str, flags: BindingFlags) -> FieldDescriptor | None:
        """Find a field visible under the flags."""
        ...

    def find_property(
        self, owner: type, name: str, flags: BindingFlags
    ) -> PropertyDescriptor | None:
        """Find a property visible under the flags."""
        ...

    def find_method(
        self,
        owner: type,
        name: str,
        flags: BindingFlags,
        signature: tuple[Any, ...] | None,
    ) -> MethodDescriptor | None:
        """Find a method; without a signature the implementation is returned."""
        ...

    def list_methods(
        self, owner: type, name: str, flags: BindingFlags
    ) -> tuple[MethodDescriptor, ...]:
        """All overload candidates of a method name, in declaration order."""
        ...

    def find_constructor(
        self, owner: type, flags: BindingFlags, signature: tuple[Any, ...] | None
    ) -> ConstructorDescriptor | None:
        """Find a constructor; without a signature the implementation is returned."""
        ...

    def list_constructors(
        self, owner: type, flags: BindingFlags
    ) -> tuple[ConstructorDescriptor, ...]:
        """All constructor candidates of a class, in declaration order."""
        ...

    # Listings

    def static_field_names(self, owner: type) -> list[str]:
        """Public static field names."""
        ...

    def property_names(self, owner: type) -> list[str]:
        """Public property names."""
        ...

    def method_names(self, owner: type) -> list[str]:
        """Public instance method names, dunder methods excluded."""
        ...
