"""Attribute inspector: typed queries over attributes attached to classes and members."""

from __future__ import annotations

from typing import Any

from reflectcache.core.attribute import collect_attributes
from reflectcache.core.metadata.operations import require_name, require_type
from reflectcache.core.types import InvalidArgumentError
from reflectcache.reflection.members import MemberMetadataCache


def _require_target(target: Any) -> Any:
    if target is None:
        raise InvalidArgumentError("An attribute target is required")
    return target


def _require_attr_type(attr_type: Any) -> type:
    if not isinstance(attr_type, type):
        raise InvalidArgumentError(f"Attribute type must be a class, got {attr_type!r}")
    return attr_type


class AttributeInspector:
    """Query attributes by type. Holds no cache of its own.

    Targets are classes, functions, properties, and descriptors returned by
    the member metadata cache.

    Args:
        members: Member metadata cache used by ``get_member_attributes``.
    """

    def __init__(self, members: MemberMetadataCache):
        self._members = members

    def get_attributes[A](self, target: Any, attr_type: type[A], inherit: bool = False) -> list[A]:
        """All attributes of ``attr_type`` (or a subclass) on a target, in declaration order.

        Raises:
            InvalidArgumentError: If target is None or attr_type is not a class.
        """
        target, attr_type = _require_target(target), _require_attr_type(attr_type)
        return [a for a in collect_attributes(target, inherit) if isinstance(a, attr_type)]

    def get_attribute[A](self, target: Any, attr_type: type[A], inherit: bool = False) -> A | None:
        """First attribute of ``attr_type`` on a target, or None."""
        return next(iter(self.get_attributes(target, attr_type, inherit)), None)

    def has_attribute(self, target: Any, attr_type: type, inherit: bool = False) -> bool:
        return self.get_attribute(target, attr_type, inherit) is not None

    def get_member_attributes[A](
        self, owner: type, name: str, attr_type: type[A], inherit: bool = False
    ) -> list[A]:
        """Attributes of a named member, resolved as property, then field, then method.

        Returns:
            Matching attributes, or an empty list if the member does not exist.
        """
        owner, name = require_type(owner), require_name(name)
        member = (
            self._members.resolve_property(owner, name)
            or self._members.resolve_field(owner, name)
            or self._members.resolve_method(owner, name)
        )
        if member is None:
            return []
        return self.get_attributes(member, attr_type, inherit)
