"""Metadata functionality: binding flags, descriptors, keys, and signature helpers."""

from reflectcache.core.metadata.models import (
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
)
from reflectcache.core.metadata.operations import (
    argument_types,
    describe_callable,
    is_argument_compatible,
    is_assignable,
    is_candidate_compatible,
    is_nullable,
    is_public_name,
    require_name,
    require_type,
    resolve_hints,
    runtime_class,
)

__all__ = [
    # Models
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
    # Operations
    "argument_types",
    "describe_callable",
    "is_argument_compatible",
    "is_assignable",
    "is_candidate_compatible",
    "is_nullable",
    "is_public_name",
    "require_name",
    "require_type",
    "resolve_hints",
    "runtime_class",
]
