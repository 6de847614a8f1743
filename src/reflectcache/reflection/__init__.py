"""Reflection services built on the shared cache store."""

from reflectcache.reflection.accessors import AccessorCompiler
from reflectcache.reflection.attributes import AttributeInspector
from reflectcache.reflection.context import Reflector, get_reflector
from reflectcache.reflection.dispatch import InvocationDispatcher, coerce_arguments
from reflectcache.reflection.members import MemberMetadataCache
from reflectcache.reflection.types import TypeRegistry

__all__ = [
    "TypeRegistry",
    "MemberMetadataCache",
    "AccessorCompiler",
    "InvocationDispatcher",
    "AttributeInspector",
    "Reflector",
    "get_reflector",
    "coerce_arguments",
]
