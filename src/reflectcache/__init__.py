"""reflectcache: cached reflection metadata and compiled accessors.

Usage:
    from dataclasses import dataclass
    from reflectcache import Reflector, attribute

    @dataclass(frozen=True)
    class Units:
        name: str

    @dataclass
    class Point:
        x: int = 0
        y: int = 0

        @property
        @attribute(Units("px"))
        def length(self) -> float:
            return (self.x**2 + self.y**2) ** 0.5

    reflector = Reflector()
    point = reflector.create_instance(Point)
    reflector.compile_setter(Point, "x", int)(point, 3)
    reflector.compile_getter(Point, "x", float)(point)       # 3.0
    prop = reflector.resolve_property(Point, "length")
    reflector.get_attribute(prop, Units)                     # Units(name='px')
    reflector.clear_all_caches()
"""

__version__ = "0.1.0"

# Cache layer
from reflectcache.cache import CacheStore, HostIntrospector, Introspector

# Configuration
from reflectcache.config import ReflectionSettings

# Core primitives
from reflectcache.core import (
    DEFAULT_CONSTRUCTOR_FLAGS,
    DEFAULT_MEMBER_FLAGS,
    AccessorKey,
    BindingFlags,
    ConstructorDescriptor,
    Factory,
    FieldDescriptor,
    Getter,
    InvalidArgumentError,
    InvokerKey,
    MemberDescriptor,
    MemberKey,
    MemberKind,
    MethodBinding,
    MethodDescriptor,
    ParameterSpec,
    PropertyDescriptor,
    Setter,
    TypeKey,
    attribute,
    build_converter,
    can_convert_value,
    convert_to,
    try_convert,
)

# Reflection services
from reflectcache.reflection import (
    AccessorCompiler,
    AttributeInspector,
    InvocationDispatcher,
    MemberMetadataCache,
    Reflector,
    TypeRegistry,
    get_reflector,
)

__all__ = [
    # Core
    "BindingFlags",
    "DEFAULT_MEMBER_FLAGS",
    "DEFAULT_CONSTRUCTOR_FLAGS",
    "MemberKind",
    "MethodBinding",
    "ParameterSpec",
    "FieldDescriptor",
    "PropertyDescriptor",
    "MethodDescriptor",
    "ConstructorDescriptor",
    "MemberDescriptor",
    "TypeKey",
    "MemberKey",
    "AccessorKey",
    "InvokerKey",
    "Getter",
    "Setter",
    "Factory",
    "InvalidArgumentError",
    "attribute",
    # Conversion
    "build_converter",
    "can_convert_value",
    "convert_to",
    "try_convert",
    # Cache
    "CacheStore",
    "Introspector",
    "HostIntrospector",
    # Config
    "ReflectionSettings",
    # Reflection
    "TypeRegistry",
    "MemberMetadataCache",
    "AccessorCompiler",
    "InvocationDispatcher",
    "AttributeInspector",
    "Reflector",
    "get_reflector",
]
