"""Value conversion: compile-time conversion plans and runtime coercion.

Accessors decide once, when they are compiled, how a member's declared type
maps onto the requested type (``build_converter``). Runtime coercion of
arbitrary values (``try_convert``) goes through pydantic's lax validation.

Usage:
    to_float = build_converter(int, float)   # float
    to_float(5)                              # 5.0
    build_converter(str, int)                # None: no legal conversion

    ok, value = try_convert("42", int)       # (True, 42)
    convert_to("red", Color)                 # Color.RED (names are case-insensitive)
"""

from __future__ import annotations

import enum
import functools
import numbers
from collections.abc import Callable
from typing import Any

from pydantic import ConfigDict, TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError, PydanticUserError

from reflectcache.core.metadata.operations import (
    NoneType,
    is_any,
    is_assignable,
    is_nullable,
    runtime_class,
    strip_annotated,
    type_name,
    union_members,
)

type Converter = Callable[[Any], Any]


def identity(value: Any) -> Any:
    """Converter for conversions that need no work."""
    return value


def _build_adapter(target: Any) -> TypeAdapter[Any] | None:
    try:
        return TypeAdapter(target)
    except PydanticSchemaGenerationError:
        pass  # Plain class without a pydantic schema; fall back to an isinstance check
    try:
        return TypeAdapter(target, config=ConfigDict(arbitrary_types_allowed=True))
    except PydanticUserError:
        return None


@functools.lru_cache(maxsize=512)
def _cached_adapter(target: Any) -> TypeAdapter[Any] | None:
    return _build_adapter(target)


def _adapter(target: Any) -> TypeAdapter[Any] | None:
    try:
        return _cached_adapter(target)
    except TypeError:
        return _build_adapter(target)  # Unhashable annotation


def _convert_enum(value: Any, target: type[enum.Enum]) -> tuple[bool, Any]:
    if isinstance(value, str):
        for name, member in target.__members__.items():
            if name.lower() == value.lower():
                return True, member
    try:
        return True, target(value)
    except (ValueError, TypeError):
        return False, None


def try_convert(value: Any, target: Any) -> tuple[bool, Any]:
    """Attempt to convert a value to a target type.

    Args:
        value: Value to convert.
        target: Class or annotation to convert to.

    Returns:
        Tuple of (succeeded, converted value). On failure the value is None.
    """
    if value is None:
        return (True, None) if is_nullable(target) else (False, None)
    target, _ = strip_annotated(target)
    if is_any(target) or is_assignable(value, target):
        return True, value
    cls = runtime_class(target)
    if cls is not None and issubclass(cls, enum.Enum):
        return _convert_enum(value, cls)
    adapter = _adapter(target)
    if adapter is None:
        return False, None
    try:
        return True, adapter.validate_python(value)
    except ValidationError:
        return False, None


def convert_to(value: Any, target: Any) -> Any:
    """Convert a value to a target type.

    Raises:
        TypeError: If the value cannot be converted.
    """
    ok, result = try_convert(value, target)
    if not ok:
        source = "None" if value is None else type(value).__qualname__
        raise TypeError(f"Cannot convert {source} to {type_name(target)}")
    return result


def can_convert_value(value: Any, target: Any) -> bool:
    """True if ``convert_to(value, target)`` would succeed."""
    return try_convert(value, target)[0]


def _checked(target: Any) -> Converter:
    def convert(value: Any) -> Any:
        return convert_to(value, target)

    return convert


def _downcast(target: type) -> Converter:
    def convert(value: Any) -> Any:
        if value is None or isinstance(value, target):
            return value
        raise TypeError(f"Cannot cast {type(value).__qualname__} to {target.__qualname__}")

    return convert


def _enum_to_int(target: type) -> Converter:
    def convert(value: Any) -> Any:
        return target(value.value)

    return convert


def _is_numeric(cls: type) -> bool:
    return issubclass(cls, numbers.Number)


def build_converter(source: Any, target: Any) -> Converter | None:
    """Plan the conversion from a declared type to a requested type.

    Legal plans, in order: identity (same type, subclass, or Any target);
    per-value checked coercion when the source is unknown or either side is a
    typing construct; numeric conversion through the target constructor;
    enum to int and int to enum; downcast with a runtime isinstance check.

    Args:
        source: Declared type of the member (or of the value being written).
        target: Requested type.

    Returns:
        Converter to bake into a compiled accessor, or None if no legal
        conversion exists.
    """
    if is_any(target):
        return identity
    source, _ = strip_annotated(source)
    target, _ = strip_annotated(target)
    if is_any(source):
        return _checked(target)
    if source == target:
        return identity

    target_members = union_members(target)
    if target_members is not None:
        plans = [build_converter(source, m) for m in target_members if m is not NoneType]
        if any(p is identity for p in plans):
            return identity
        if any(p is not None for p in plans):
            return _checked(target)
        return None

    source_members = union_members(source)
    if source_members is not None:
        plans = [build_converter(m, target) for m in source_members if m is not NoneType]
        if any(p is None for p in plans):
            return None
        if all(p is identity for p in plans):
            return identity
        return _checked(target)

    src, dst = runtime_class(source), runtime_class(target)
    if src is None or dst is None:
        return _checked(target)
    try:
        if issubclass(src, dst):
            return identity
        if issubclass(dst, enum.Enum):
            return dst if issubclass(src, numbers.Integral) else None
        if issubclass(src, enum.Enum):
            if issubclass(dst, numbers.Integral) and not issubclass(dst, bool):
                return _enum_to_int(dst)
            return None
        if _is_numeric(src) and _is_numeric(dst):
            if (
                issubclass(src, numbers.Complex)
                and not issubclass(src, numbers.Real)
                and issubclass(dst, numbers.Real)
            ):
                return None  # complex -> real drops the imaginary part
            return dst
        if issubclass(dst, src):
            return _downcast(dst)
    except TypeError:
        return _checked(target)  # Non-runtime-checkable protocol on one side
    return None
