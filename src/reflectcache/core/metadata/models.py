"""Metadata models: binding flags, member descriptors, and cache keys.

Descriptors are immutable handles into the live type system. They compare by
value, so a descriptor resolved again after a cache reset equals the one
resolved before it.

Usage:
    flags = BindingFlags.PUBLIC | BindingFlags.INSTANCE
    key = MemberKey(owner=Point, kind=MemberKind.FIELD, name="x", flags=flags)
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum, IntFlag, auto
from typing import Any

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class BindingFlags(IntFlag):
    """Which members a lookup may see.

    A member is visible when the flags admit both its visibility
    (PUBLIC / NON_PUBLIC) and its scope (INSTANCE / STATIC).
    """

    NONE = 0
    INSTANCE = 1
    STATIC = 2
    PUBLIC = 4
    NON_PUBLIC = 8
    DECLARED_ONLY = 16  # Ignore members inherited from base classes

    ALL = PUBLIC | NON_PUBLIC | INSTANCE | STATIC
    PUBLIC_INSTANCE = PUBLIC | INSTANCE
    PUBLIC_STATIC = PUBLIC | STATIC

    def admits(self, *, public: bool, static: bool) -> bool:
        """Check whether a member with this visibility and scope is visible.

        Args:
            public: True if the member name is public.
            static: True if the member belongs to the class rather than instances.

        Returns:
            True if both the visibility and the scope flag are set.
        """
        visibility = BindingFlags.PUBLIC if public else BindingFlags.NON_PUBLIC
        scope = BindingFlags.STATIC if static else BindingFlags.INSTANCE
        return bool(self & visibility) and bool(self & scope)


DEFAULT_MEMBER_FLAGS = BindingFlags.ALL
DEFAULT_CONSTRUCTOR_FLAGS = BindingFlags.PUBLIC | BindingFlags.NON_PUBLIC | BindingFlags.INSTANCE


class MemberKind(Enum):
    """Kind of member a cache slot holds."""

    FIELD = auto()
    PROPERTY = auto()
    METHOD = auto()
    CONSTRUCTOR = auto()
    METHOD_GROUP = auto()  # All overload candidates of a method name
    CONSTRUCTOR_GROUP = auto()  # All constructor candidates of a type


class MethodBinding(Enum):
    """How a method receives its first argument."""

    INSTANCE = auto()  # Plain function, receives the instance
    STATIC = auto()  # staticmethod, receives nothing
    CLASS = auto()  # classmethod, receives the class


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """One parameter of a method or constructor signature (self/cls excluded)."""

    name: str
    annotation: Any
    kind: Any  # inspect.Parameter kind
    has_default: bool = False

    @property
    def is_positional(self) -> bool:
        return self.kind in _POSITIONAL

    @property
    def is_required_keyword(self) -> bool:
        return self.kind == inspect.Parameter.KEYWORD_ONLY and not self.has_default


def _positional_types(parameters: tuple[ParameterSpec, ...]) -> tuple[Any, ...]:
    return tuple(p.annotation for p in parameters if p.is_positional)


def _arity(parameters: tuple[ParameterSpec, ...]) -> tuple[int, int | None]:
    required = 0
    maximum: int | None = 0
    for p in parameters:
        if p.kind == inspect.Parameter.VAR_POSITIONAL:
            maximum = None
        elif p.is_positional:
            if maximum is not None:
                maximum += 1
            if not p.has_default:
                required += 1
    return required, maximum


def _required_keywords(parameters: tuple[ParameterSpec, ...]) -> tuple[str, ...]:
    return tuple(p.name for p in parameters if p.is_required_keyword)


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Resolved field: an instance attribute or a class-level value.

    Attributes:
        name: Name the caller asked for.
        declaring_type: Class in whose namespace the field was found.
        field_type: Declared type, or Any when unannotated.
        is_static: True for class-level values and ClassVar annotations.
        is_public: False for names starting with an underscore.
        attribute_name: Name used with getattr/setattr (differs when mangled).
        is_read_only: True for fields of frozen dataclasses or frozen pydantic models.
        metadata: Annotated extras and pydantic field metadata, in declaration order.
    """

    name: str
    declaring_type: type
    field_type: Any
    is_static: bool
    is_public: bool
    attribute_name: str
    is_read_only: bool = False
    metadata: tuple[Any, ...] = field(default=(), compare=False)

    @property
    def kind(self) -> MemberKind:
        return MemberKind.FIELD


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """Resolved ``property``. Properties are always instance members."""

    name: str
    declaring_type: type
    property_type: Any
    fget: Any
    fset: Any
    is_public: bool

    @property
    def kind(self) -> MemberKind:
        return MemberKind.PROPERTY

    @property
    def can_read(self) -> bool:
        return self.fget is not None

    @property
    def can_write(self) -> bool:
        return self.fset is not None


@dataclass(frozen=True, slots=True)
class MethodDescriptor:
    """Resolved method, or one ``typing.overload`` signature of it.

    ``function`` is always the runtime implementation; for an overload the
    ``parameters`` describe the overload stub while calls still go to the
    implementation.
    """

    name: str
    declaring_type: type
    function: Any
    binding: MethodBinding
    parameters: tuple[ParameterSpec, ...]
    return_type: Any
    is_public: bool
    is_overload: bool = False

    @property
    def kind(self) -> MemberKind:
        return MemberKind.METHOD

    @property
    def is_static(self) -> bool:
        return self.binding is not MethodBinding.INSTANCE

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        """Annotations of the positional parameters, in order."""
        return _positional_types(self.parameters)

    @property
    def arity(self) -> tuple[int, int | None]:
        """(required, maximum) positional argument counts; maximum None means unbounded."""
        return _arity(self.parameters)

    @property
    def required_keywords(self) -> tuple[str, ...]:
        """Keyword-only parameters without a default. Positional calls can never satisfy them."""
        return _required_keywords(self.parameters)

    def invoke(self, target: Any, args: tuple[Any, ...]) -> Any:
        """Call the implementation with the receiver its binding expects.

        Args:
            target: Instance for instance methods; ignored for static methods.
            args: Positional arguments.

        Returns:
            Whatever the method returns. Exceptions propagate unchanged.
        """
        if self.binding is MethodBinding.INSTANCE:
            return self.function(target, *args)
        if self.binding is MethodBinding.CLASS:
            if target is None:
                owner = self.declaring_type
            elif isinstance(target, type):
                owner = target
            else:
                owner = type(target)
            return self.function(owner, *args)
        return self.function(*args)


@dataclass(frozen=True, slots=True)
class ConstructorDescriptor:
    """Resolved constructor signature of a class."""

    declaring_type: type
    parameters: tuple[ParameterSpec, ...]
    is_overload: bool = False

    @property
    def kind(self) -> MemberKind:
        return MemberKind.CONSTRUCTOR

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        return _positional_types(self.parameters)

    @property
    def arity(self) -> tuple[int, int | None]:
        return _arity(self.parameters)

    @property
    def required_keywords(self) -> tuple[str, ...]:
        return _required_keywords(self.parameters)


MemberDescriptor = FieldDescriptor | PropertyDescriptor | MethodDescriptor | ConstructorDescriptor


# --- Cache keys ---
# Value objects: identical lookups hash and compare equal.


type TypeKey = str
"""Exact fully-qualified type name as passed by the caller."""


@dataclass(frozen=True, slots=True)
class MemberKey:
    """Composite key for one member lookup.

    ``signature`` is None when the caller gave no parameter types
    ("first match wins"); ``()`` is an explicit empty signature.
    """

    owner: type
    kind: MemberKind
    name: str
    flags: BindingFlags
    signature: tuple[Any, ...] | None = None


@dataclass(frozen=True, slots=True)
class AccessorKey:
    """Key of a compiled getter or setter; includes the requested value type."""

    owner: type
    member: str
    value_type: Any


@dataclass(frozen=True, slots=True)
class InvokerKey:
    """Key of a bound invoker.

    ``instance_id`` is None for static and class bindings so they never
    collide with a binding to a specific instance.
    """

    declaring_type: type
    method_name: str
    shape: Any
    instance_id: int | None
    binding: MethodBinding
