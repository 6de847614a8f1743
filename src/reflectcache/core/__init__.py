"""Core functionalities: stateless models, keys, and pure operations.

Architecture Note:
    core/ contains pure, stateless building blocks: descriptors, cache keys,
    signature and compatibility checks, conversion plans, attribute collection.
    For stateful services (caches, the host introspector), see cache/ and reflection/.
"""

from reflectcache.core.attribute import attribute, collect_attributes, own_attributes
from reflectcache.core.conversion import (
    build_converter,
    can_convert_value,
    convert_to,
    try_convert,
)
from reflectcache.core.metadata import (
    DEFAULT_CONSTRUCTOR_FLAGS,
    DEFAULT_MEMBER_FLAGS,
    AccessorKey,
    BindingFlags,
    ConstructorDescriptor,
    FieldDescriptor,
    InvokerKey,
    MemberDescriptor,
    MemberKey,
    MemberKind,
    MethodBinding,
    MethodDescriptor,
    ParameterSpec,
    PropertyDescriptor,
    TypeKey,
    is_candidate_compatible,
)
from reflectcache.core.types import Factory, Getter, InvalidArgumentError, Setter

__all__ = [
    # Types
    "Getter",
    "Setter",
    "Factory",
    "InvalidArgumentError",
    # Metadata
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
    "is_candidate_compatible",
    # Conversion
    "build_converter",
    "can_convert_value",
    "convert_to",
    "try_convert",
    # Attributes
    "attribute",
    "collect_attributes",
    "own_attributes",
]
