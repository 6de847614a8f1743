"""Invocation dispatcher: overload selection, construction, and bound invokers.

Selection for a call with arguments:
    1. exact match: the candidate whose parameter annotations equal the
       runtime types of the arguments (cached per signature)
    2. otherwise the first compatible candidate in declaration order, where
       every argument is None for a nullable parameter, already an instance
       of the parameter type, or convertible to it

Arguments that are merely convertible are converted before the call.
Exceptions raised by the invoked code propagate unchanged.
"""

from __future__ import annotations

import collections.abc
import inspect
import logging
import types
import warnings
from typing import Any, get_args, get_origin

from reflectcache.cache.store import CacheStore
from reflectcache.core.conversion import convert_to
from reflectcache.core.metadata.models import (
    DEFAULT_CONSTRUCTOR_FLAGS,
    DEFAULT_MEMBER_FLAGS,
    BindingFlags,
    ConstructorDescriptor,
    InvokerKey,
    MethodBinding,
    MethodDescriptor,
)
from reflectcache.core.metadata.operations import (
    accepts_arity,
    argument_types,
    is_assignable,
    is_candidate_compatible,
    is_subtype,
    require_name,
    require_type,
    type_name,
)
from reflectcache.core.types import Factory, InvalidArgumentError
from reflectcache.reflection.members import MemberMetadataCache

logger = logging.getLogger(__name__)


def _describe_args(args: tuple[Any, ...]) -> str:
    return ", ".join("None" if a is None else type(a).__qualname__ for a in args)


def _parameter_annotations(
    candidate: MethodDescriptor | ConstructorDescriptor, count: int
) -> list[Any]:
    positional = [p.annotation for p in candidate.parameters if p.is_positional]
    variadic = next(
        (p.annotation for p in candidate.parameters if p.kind == inspect.Parameter.VAR_POSITIONAL),
        Any,
    )
    return [positional[i] if i < len(positional) else variadic for i in range(count)]


def coerce_arguments(
    candidate: MethodDescriptor | ConstructorDescriptor, args: tuple[Any, ...]
) -> tuple[Any, ...]:
    """Convert arguments that are compatible only through conversion.

    Args:
        candidate: Selected method or constructor.
        args: Positional call arguments, already checked for compatibility.

    Returns:
        Arguments ready to pass to the candidate.
    """
    annotations = _parameter_annotations(candidate, len(args))
    return tuple(
        value if value is None or is_assignable(value, annotation) else convert_to(value, annotation)
        for value, annotation in zip(args, annotations, strict=True)
    )


class InvocationDispatcher:
    """Invoke methods and constructors selected from runtime arguments.

    Args:
        store: Cache store holding the ``factories`` and ``invokers`` tables.
        members: Member metadata cache supplying candidates.
    """

    def __init__(self, store: CacheStore, members: MemberMetadataCache):
        self._store = store
        self._members = members

    # --- Methods ---

    def select_method(
        self,
        owner: type,
        name: str,
        *args: Any,
        flags: BindingFlags = DEFAULT_MEMBER_FLAGS,
    ) -> MethodDescriptor:
        """Select the method overload a call with ``args`` would use.

        Raises:
            InvalidArgumentError: If no visible candidate accepts the arguments.
        """
        owner, name = require_type(owner), require_name(name, "method")
        exact = self._members.resolve_method(owner, name, argument_types(args), flags)
        if exact is not None:
            return exact
        for candidate in self._members.get_method_group(owner, name, flags):
            if is_candidate_compatible(candidate, args):
                return candidate
        raise InvalidArgumentError(
            f"No matching method {owner.__qualname__}.{name}({_describe_args(args)})"
        )

    def invoke(self, target: Any, method_name: str, *args: Any) -> Any:
        """Invoke a method on an instance.

        Args:
            target: Instance to call the method on.
            method_name: Method name; overloads are selected from ``args``.
            args: Positional arguments.

        Returns:
            The method's return value.

        Raises:
            InvalidArgumentError: If target is None or no overload matches.
        """
        if target is None:
            raise InvalidArgumentError(f"Cannot invoke {method_name!r} on None")
        method = self.select_method(type(target), method_name, *args)
        return method.invoke(target, coerce_arguments(method, args))

    def invoke_static(self, owner: type, method_name: str, *args: Any) -> Any:
        """Invoke a public static method or classmethod.

        Raises:
            InvalidArgumentError: If owner is not a class or no overload matches.
        """
        owner = require_type(owner)
        method = self.select_method(owner, method_name, *args, flags=BindingFlags.PUBLIC_STATIC)
        return method.invoke(owner, coerce_arguments(method, args))

    # --- Construction ---

    def select_constructor(
        self, owner: type, *args: Any, flags: BindingFlags = DEFAULT_CONSTRUCTOR_FLAGS
    ) -> ConstructorDescriptor:
        """Select the constructor a call with ``args`` would use.

        Raises:
            InvalidArgumentError: If no constructor accepts the arguments.
        """
        owner = require_type(owner)
        exact = self._members.resolve_constructor(owner, argument_types(args), flags)
        if exact is not None:
            return exact
        for candidate in self._members.get_constructor_group(owner, flags):
            if is_candidate_compatible(candidate, args):
                return candidate
        raise InvalidArgumentError(
            f"No matching constructor {owner.__qualname__}({_describe_args(args)})"
        )

    def create_instance[T](self, owner: type[T], *args: Any) -> T:
        """Create an instance, selecting the constructor from ``args``.

        Without arguments the parameterless factory is validated once and
        cached per type. With arguments the candidates are scanned on every call.

        Raises:
            InvalidArgumentError: If owner is not a concrete class or no
                constructor accepts the arguments.
        """
        owner = require_type(owner)
        if not args:
            factory = self._store.get_or_create("factories", owner, lambda: self._build_factory(owner))
            return factory()
        constructor = self.select_constructor(owner, *args)
        return owner(*coerce_arguments(constructor, args))

    def _build_factory[T](self, owner: type[T]) -> Factory[T]:
        if inspect.isabstract(owner):
            raise InvalidArgumentError(f"Cannot instantiate abstract class {owner.__qualname__}")
        if self._members.resolve_constructor(owner, ()) is None and not any(
            is_candidate_compatible(c, ()) for c in self._members.get_constructor_group(owner)
        ):
            raise InvalidArgumentError(f"{owner.__qualname__} has no parameterless constructor")
        logger.debug("Cached parameterless factory for %s", owner.__qualname__)
        return owner

    # --- Bound invokers ---

    def create_bound_invoker(
        self, target: Any, method: MethodDescriptor, shape: Any = None
    ) -> collections.abc.Callable[..., Any]:
        """Bind a method to an instance (or to nothing, for static methods).

        Args:
            target: Instance for instance methods; None for static and class methods.
            method: Descriptor from the member metadata cache.
            shape: Optional ``Callable[[...], R]`` annotation the invoker must satisfy.

        Returns:
            Callable taking the method's arguments (receiver excluded). The
            same (method, shape, instance) returns the same callable.

        Raises:
            InvalidArgumentError: If method is not a method descriptor, an
                instance method gets no (or a foreign) target, or the shape
                does not fit the method's signature.
        """
        if not isinstance(method, MethodDescriptor):
            raise InvalidArgumentError(f"Expected a MethodDescriptor, got {type(method).__name__}")
        if method.binding is MethodBinding.INSTANCE:
            if target is None:
                raise InvalidArgumentError(
                    f"Instance method {method.declaring_type.__qualname__}.{method.name} needs a target"
                )
            if not isinstance(target, method.declaring_type):
                raise InvalidArgumentError(
                    f"{type(target).__qualname__} is not a {method.declaring_type.__qualname__}"
                )
        elif target is not None:
            warnings.warn(
                f"Ignoring instance passed for {method.binding.name.lower()} method "
                f"{method.declaring_type.__qualname__}.{method.name}",
                RuntimeWarning,
                stacklevel=2,
            )
            target = None
        if shape is not None:
            _check_shape(method, shape)

        key = InvokerKey(
            declaring_type=method.declaring_type,
            method_name=method.name,
            shape=shape,
            instance_id=id(target) if target is not None else None,
            binding=method.binding,
        )
        try:
            hash(key)
        except TypeError as e:
            raise InvalidArgumentError(f"Invoker shape must be hashable: {shape!r}") from e
        # The cached bound method keeps target alive, so its id cannot be reused
        return self._store.get_or_create("invokers", key, lambda: _bind(method, target))


def _bind(method: MethodDescriptor, target: Any) -> collections.abc.Callable[..., Any]:
    if method.binding is MethodBinding.INSTANCE:
        return types.MethodType(method.function, target)
    if method.binding is MethodBinding.CLASS:
        return types.MethodType(method.function, method.declaring_type)
    return method.function


def _check_shape(method: MethodDescriptor, shape: Any) -> None:
    if get_origin(shape) is not collections.abc.Callable:
        raise InvalidArgumentError(f"Invoker shape must be a Callable annotation, got {shape!r}")
    parameters, returns = get_args(shape)
    if not is_subtype(method.return_type, returns):
        raise InvalidArgumentError(
            f"{method.name} returns {type_name(method.return_type)}, shape expects {type_name(returns)}"
        )
    if parameters is Ellipsis:
        return
    if method.required_keywords:
        raise InvalidArgumentError(
            f"{method.name} requires keyword argument(s) {', '.join(method.required_keywords)}"
        )
    if not accepts_arity(method.arity, len(parameters)):
        raise InvalidArgumentError(
            f"{method.name} cannot be called with {len(parameters)} argument(s)"
        )
    for given, expected in zip(parameters, _parameter_annotations(method, len(parameters)), strict=True):
        if not is_subtype(given, expected):
            raise InvalidArgumentError(
                f"{method.name} expects {type_name(expected)}, shape passes {type_name(given)}"
            )
