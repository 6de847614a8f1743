"""Member metadata cache: one live lookup per (type, kind, name, flags, signature).

Every resolve_* call validates its arguments, builds a MemberKey, and asks
the store. On a miss the introspector runs once and its result, including
None, is cached under that key.

Usage:
    members = MemberMetadataCache(store, HostIntrospector())
    members.resolve_field(Point, "x")
    members.resolve_method(Parser, "parse", (str,))
    members.resolve_constructor(Point, (int, int))
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from reflectcache.cache.protocol import Introspector
from reflectcache.cache.store import CacheStore
from reflectcache.core.metadata.models import (
    DEFAULT_CONSTRUCTOR_FLAGS,
    DEFAULT_MEMBER_FLAGS,
    BindingFlags,
    ConstructorDescriptor,
    FieldDescriptor,
    MemberKey,
    MemberKind,
    MethodDescriptor,
    PropertyDescriptor,
)
from reflectcache.core.metadata.operations import require_name, require_type
from reflectcache.core.types import InvalidArgumentError

_CONSTRUCTOR_NAME = "__init__"


def _signature(parameter_types: Sequence[Any] | None) -> tuple[Any, ...] | None:
    if parameter_types is None:
        return None
    signature = tuple(parameter_types)
    try:
        hash(signature)
    except TypeError as e:
        raise InvalidArgumentError(f"Parameter types must be hashable: {signature!r}") from e
    return signature


def _flags(flags: BindingFlags | int) -> BindingFlags:
    if not isinstance(flags, int):
        raise InvalidArgumentError(f"Binding flags must be BindingFlags, got {type(flags).__name__}")
    return BindingFlags(flags)


class MemberMetadataCache:
    """Memoized member lookups.

    Args:
        store: Cache store holding the member tables.
        introspector: Live lookup facility consulted on a miss.
    """

    def __init__(self, store: CacheStore, introspector: Introspector):
        self._store = store
        self._introspector = introspector

    def resolve_field(
        self, owner: type, name: str, flags: BindingFlags = DEFAULT_MEMBER_FLAGS
    ) -> FieldDescriptor | None:
        """Resolve a field (instance attribute or class-level value).

        Raises:
            InvalidArgumentError: If owner is not a class or name is empty.
        """
        owner, name, flags = require_type(owner), require_name(name, "field"), _flags(flags)
        key = MemberKey(owner, MemberKind.FIELD, name, flags)
        return self._store.get_or_create(
            "fields", key, lambda: self._introspector.find_field(owner, name, flags)
        )

    def resolve_property(
        self, owner: type, name: str, flags: BindingFlags = DEFAULT_MEMBER_FLAGS
    ) -> PropertyDescriptor | None:
        """Resolve a property.

        Raises:
            InvalidArgumentError: If owner is not a class or name is empty.
        """
        owner, name, flags = require_type(owner), require_name(name, "property"), _flags(flags)
        key = MemberKey(owner, MemberKind.PROPERTY, name, flags)
        return self._store.get_or_create(
            "properties", key, lambda: self._introspector.find_property(owner, name, flags)
        )

    def resolve_method(
        self,
        owner: type,
        name: str,
        parameter_types: Sequence[Any] | None = None,
        flags: BindingFlags = DEFAULT_MEMBER_FLAGS,
    ) -> MethodDescriptor | None:
        """Resolve a method, optionally one overload by exact parameter types.

        Args:
            owner: Class to search.
            name: Method name.
            parameter_types: Positional parameter annotations to match exactly,
                or None for the implementation (first match).
            flags: Visibility and scope filter.

        Returns:
            Method descriptor, or None if no visible method matches.

        Raises:
            InvalidArgumentError: If owner is not a class, name is empty, or
                parameter_types is not hashable.
        """
        owner, name, flags = require_type(owner), require_name(name, "method"), _flags(flags)
        signature = _signature(parameter_types)
        key = MemberKey(owner, MemberKind.METHOD, name, flags, signature)
        return self._store.get_or_create(
            "methods",
            key,
            lambda: self._introspector.find_method(owner, name, flags, signature),
        )

    def resolve_constructor(
        self,
        owner: type,
        parameter_types: Sequence[Any] | None = None,
        flags: BindingFlags = DEFAULT_CONSTRUCTOR_FLAGS,
    ) -> ConstructorDescriptor | None:
        """Resolve a constructor, optionally one overload by exact parameter types.

        Raises:
            InvalidArgumentError: If owner is not a class or parameter_types is not hashable.
        """
        owner, flags = require_type(owner), _flags(flags)
        signature = _signature(parameter_types)
        key = MemberKey(owner, MemberKind.CONSTRUCTOR, _CONSTRUCTOR_NAME, flags, signature)
        return self._store.get_or_create(
            "constructors",
            key,
            lambda: self._introspector.find_constructor(owner, flags, signature),
        )

    def get_method_group(
        self, owner: type, name: str, flags: BindingFlags = DEFAULT_MEMBER_FLAGS
    ) -> tuple[MethodDescriptor, ...]:
        """All overload candidates of a method name, in declaration order."""
        owner, name, flags = require_type(owner), require_name(name, "method"), _flags(flags)
        key = MemberKey(owner, MemberKind.METHOD_GROUP, name, flags)
        return self._store.get_or_create(
            "method_groups", key, lambda: self._introspector.list_methods(owner, name, flags)
        )

    def get_constructor_group(
        self, owner: type, flags: BindingFlags = DEFAULT_CONSTRUCTOR_FLAGS
    ) -> tuple[ConstructorDescriptor, ...]:
        """All constructor candidates of a class, in declaration order."""
        owner, flags = require_type(owner), _flags(flags)
        key = MemberKey(owner, MemberKind.CONSTRUCTOR_GROUP, _CONSTRUCTOR_NAME, flags)
        return self._store.get_or_create(
            "constructor_groups", key, lambda: self._introspector.list_constructors(owner, flags)
        )

    # Listing queries are not cached

    def get_static_field_names(self, owner: type) -> list[str]:
        return self._introspector.static_field_names(require_type(owner))

    def get_property_names(self, owner: type) -> list[str]:
        return self._introspector.property_names(require_type(owner))

    def get_method_names(self, owner: type) -> list[str]:
        return self._introspector.method_names(require_type(owner))
