"""Accessor compiler: memoized getter/setter closures for fields and properties.

The conversion between the member's declared type and the requested type is
planned once, when the accessor is compiled. A compiled accessor performs no
lookups; it only reads or writes the member and applies the planned
conversion.

Usage:
    get_x = accessors.compile_getter(Point, "x", int)
    set_x = accessors.compile_setter(Point, "x", int)
    set_x(point, 5)
    get_x(point)  # 5
"""

from __future__ import annotations

import operator
from typing import Any

from reflectcache.cache.store import CacheStore
from reflectcache.core.conversion import build_converter, identity
from reflectcache.core.metadata.models import AccessorKey, FieldDescriptor
from reflectcache.core.metadata.operations import require_name, require_type, type_name
from reflectcache.core.types import Getter, InvalidArgumentError, Setter
from reflectcache.reflection.members import MemberMetadataCache


def _accessor_key(owner: type, member: str, value_type: Any) -> AccessorKey:
    key = AccessorKey(owner, member, value_type)
    try:
        hash(key)
    except TypeError as e:
        raise InvalidArgumentError(f"Requested type must be hashable: {value_type!r}") from e
    return key


def _mismatch(owner: type, member: str, value_type: Any) -> InvalidArgumentError:
    return InvalidArgumentError(
        f"Cannot compile accessor {owner.__qualname__}.{member} as {type_name(value_type)}: "
        "member not found, or type mismatch"
    )


def _field_reader(field: FieldDescriptor) -> Getter[Any]:
    if not field.is_static:
        return operator.attrgetter(field.attribute_name)
    declaring_type, attribute_name = field.declaring_type, field.attribute_name

    def read_static(target: Any) -> Any:
        return getattr(declaring_type, attribute_name)

    return read_static


def _field_writer(field: FieldDescriptor) -> Setter[Any]:
    attribute_name = field.attribute_name
    if field.is_static:
        declaring_type = field.declaring_type

        def write_static(target: Any, value: Any) -> None:
            setattr(declaring_type, attribute_name, value)

        return write_static

    def write(target: Any, value: Any) -> None:
        setattr(target, attribute_name, value)

    return write


class AccessorCompiler:
    """Compile and memoize typed accessors.

    Properties take precedence over fields of the same name. Compiled
    accessors are cached per (owner, member, requested type); asking again
    returns the very same callable until the caches are reset.

    Args:
        store: Cache store holding the ``getters`` and ``setters`` tables.
        members: Member metadata cache used to find the member.
    """

    def __init__(self, store: CacheStore, members: MemberMetadataCache):
        self._store = store
        self._members = members

    def compile_getter[R](self, owner: type, member: str, result_type: type[R] | Any = Any) -> Getter[R]:
        """Compile a getter reading ``member`` and converting it to ``result_type``.

        Args:
            owner: Class declaring (or inheriting) the member.
            member: Property or field name.
            result_type: Type the getter returns; Any returns the raw value.

        Returns:
            Callable taking the target instance. Static fields ignore the target.

        Raises:
            InvalidArgumentError: If the member does not exist, has no getter,
                or its declared type cannot be converted to result_type.
        """
        owner, member = require_type(owner), require_name(member)
        key = _accessor_key(owner, member, result_type)
        return self._store.get_or_create(
            "getters", key, lambda: self._build_getter(owner, member, result_type)
        )

    def _build_getter(self, owner: type, member: str, result_type: Any) -> Getter[Any]:
        prop = self._members.resolve_property(owner, member)
        if prop is not None and prop.can_read:
            declared, read = prop.property_type, prop.fget
        else:
            field = self._members.resolve_field(owner, member)
            if field is None:
                raise _mismatch(owner, member, result_type)
            declared, read = field.field_type, _field_reader(field)

        convert = build_converter(declared, result_type)
        if convert is None:
            raise _mismatch(owner, member, result_type)
        if convert is identity:
            return read

        def get_converted(target: Any) -> Any:
            return convert(read(target))

        return get_converted

    def compile_setter[V](self, owner: type, member: str, value_type: type[V] | Any = Any) -> Setter[V]:
        """Compile a setter converting a ``value_type`` value and writing ``member``.

        Args:
            owner: Class declaring (or inheriting) the member.
            member: Property or field name.
            value_type: Type of the values the caller passes in.

        Returns:
            Callable taking (target, value). Static fields ignore the target.

        Raises:
            InvalidArgumentError: If the member does not exist, is read-only,
                or value_type cannot be converted to its declared type.
        """
        owner, member = require_type(owner), require_name(member)
        key = _accessor_key(owner, member, value_type)
        return self._store.get_or_create(
            "setters", key, lambda: self._build_setter(owner, member, value_type)
        )

    def _build_setter(self, owner: type, member: str, value_type: Any) -> Setter[Any]:
        prop = self._members.resolve_property(owner, member)
        if prop is not None and prop.can_write:
            declared, write = prop.property_type, prop.fset
        else:
            field = self._members.resolve_field(owner, member)
            if field is None:
                raise _mismatch(owner, member, value_type)
            if field.is_read_only:
                raise InvalidArgumentError(
                    f"Cannot compile setter for {owner.__qualname__}.{member}: field is read-only"
                )
            declared, write = field.field_type, _field_writer(field)

        convert = build_converter(value_type, declared)
        if convert is None:
            raise _mismatch(owner, member, value_type)
        if convert is identity:
            return write

        def set_converted(target: Any, value: Any) -> None:
            write(target, convert(value))

        return set_converted
