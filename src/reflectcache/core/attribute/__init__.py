"""Attribute functionality: the attribute decorator and attribute collection."""

from reflectcache.core.attribute.core import (
    ATTRIBUTES_SLOT,
    attribute,
    collect_attributes,
    own_attributes,
)

__all__ = [
    "ATTRIBUTES_SLOT",
    "attribute",
    "collect_attributes",
    "own_attributes",
]
