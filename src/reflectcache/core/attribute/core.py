"""Attribute decorator and attribute collection.

Attributes are plain objects attached to classes and members. Any object can
be an attribute; queries filter by isinstance.

Usage:
    @dataclass(frozen=True)
    class Obsolete:
        message: str = ""

    @attribute(Obsolete("use Point3"))
    class Point:
        x: Annotated[int, Range(0, 100)]   # field metadata is an attribute too

        @attribute(Obsolete())
        def legacy(self) -> None: ...

        @property
        @attribute(Units("px"))
        def width(self) -> int: ...
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any, TypeVar

from reflectcache.core.metadata.models import (
    ConstructorDescriptor,
    FieldDescriptor,
    MethodDescriptor,
    PropertyDescriptor,
)
from reflectcache.core.metadata.operations import attribute_names
from reflectcache.core.types import InvalidArgumentError

T = TypeVar("T")

ATTRIBUTES_SLOT = "__reflect_attributes__"


def _holder(target: Any) -> Any:
    """Object that physically carries the attributes of a target."""
    if isinstance(target, property):
        return target.fget
    if isinstance(target, (staticmethod, classmethod)):
        return target.__func__
    return target


def attribute(*instances: Any) -> Callable[[T], T]:
    """Attach attribute instances to a class, function, property, or static/class method.

    Stacked decorators keep declaration order: attributes of the top-most
    decorator come first.

    Args:
        instances: Attribute objects to attach.

    Returns:
        Decorator returning the target unchanged.

    Raises:
        InvalidArgumentError: If no instances are given or the target cannot carry attributes.
    """
    if not instances:
        raise InvalidArgumentError("attribute() requires at least one attribute instance")

    def decorator(target: T) -> T:
        holder = _holder(target)
        if holder is None:
            raise InvalidArgumentError("Cannot attach attributes to a property without a getter")
        existing = own_attributes(holder)
        try:
            setattr(holder, ATTRIBUTES_SLOT, tuple(instances) + existing)
        except (AttributeError, TypeError) as e:
            raise InvalidArgumentError(f"Cannot attach attributes to {target!r}") from e
        return target

    return decorator


def own_attributes(target: Any) -> tuple[Any, ...]:
    """Attributes declared directly on a target, without inheritance.

    Args:
        target: Class, function, property, or member descriptor.

    Returns:
        Attributes in declaration order.
    """
    if isinstance(target, FieldDescriptor):
        return target.metadata
    if isinstance(target, PropertyDescriptor):
        holder = target.fget
    elif isinstance(target, MethodDescriptor):
        holder = target.function
    elif isinstance(target, ConstructorDescriptor):
        holder = target.declaring_type.__dict__.get("__init__")
    else:
        holder = _holder(target)
    if holder is None:
        return ()
    if isinstance(holder, type):
        # Class attributes must not leak into subclasses without inherit=True
        return holder.__dict__.get(ATTRIBUTES_SLOT, ())
    return getattr(holder, ATTRIBUTES_SLOT, ())


def _inherited_members(descriptor: PropertyDescriptor | MethodDescriptor) -> Iterator[Any]:
    for base in descriptor.declaring_type.__mro__[1:]:
        for name in attribute_names(base, descriptor.name):
            raw = base.__dict__.get(name)
            if raw is not None:
                yield raw
                break


def collect_attributes(target: Any, inherit: bool = False) -> list[Any]:
    """All attributes of a target, optionally including inherited ones.

    With ``inherit``, classes contribute their bases' attributes in MRO
    order, and properties/methods contribute the attributes of same-named
    members they override. Field metadata and plain functions have no
    inheritance chain.

    Args:
        target: Class, function, property, or member descriptor.
        inherit: Include attributes from base classes.

    Returns:
        Attributes, own first.
    """
    if isinstance(target, type):
        classes = target.__mro__ if inherit else (target,)
        return [a for klass in classes for a in own_attributes(klass)]
    result = list(own_attributes(target))
    if inherit and isinstance(target, (PropertyDescriptor, MethodDescriptor)):
        for raw in _inherited_members(target):
            result.extend(own_attributes(raw))
    return result
