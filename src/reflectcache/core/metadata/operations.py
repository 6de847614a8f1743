"""Pure helpers over names, annotations, and signatures.

Nothing here caches; the cache layer calls these on a miss and the
dispatcher calls the compatibility checks on every parameterized call.
"""

from __future__ import annotations

import inspect
import sys
import types
import typing
from typing import Annotated, Any, ClassVar, Literal, TypeVar, Union, get_args, get_origin

from reflectcache.core.metadata.models import (
    ConstructorDescriptor,
    MethodDescriptor,
    ParameterSpec,
)
from reflectcache.core.types import InvalidArgumentError

NoneType = type(None)

# Signature used when the host cannot describe a callable (C builtins): any arity, any type.
UNKNOWN_PARAMETERS = (ParameterSpec("args", Any, inspect.Parameter.VAR_POSITIONAL),)


# --- Argument validation ---


def require_type(owner: Any, what: str = "type") -> type:
    """Validate that a lookup owner is a class.

    Raises:
        InvalidArgumentError: If owner is None or not a class.
    """
    if owner is None:
        raise InvalidArgumentError(f"A {what} is required")
    if not isinstance(owner, type):
        raise InvalidArgumentError(f"Expected a class for {what}, got {type(owner).__name__}")
    return owner


def require_name(name: Any, what: str = "member") -> str:
    """Validate that a member name is a non-empty string.

    Raises:
        InvalidArgumentError: If name is None, empty, or not a string.
    """
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError(f"A non-empty {what} name is required, got {name!r}")
    return name


def type_name(annotation: Any) -> str:
    """Readable name of a class or annotation for error messages."""
    if isinstance(annotation, type):
        return annotation.__qualname__
    return repr(annotation)


# --- Names ---


def is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def is_public_name(name: str) -> bool:
    """Names with a leading underscore are non-public; dunder names are public."""
    return not name.startswith("_") or is_dunder(name)


def attribute_names(klass: type, name: str) -> tuple[str, ...]:
    """Names under which ``name`` may be stored in ``klass``'s namespace.

    ``__secret`` declared in ``class Vault`` lives as ``_Vault__secret``.
    """
    if name.startswith("__") and not name.endswith("__"):
        return (name, f"_{klass.__name__.lstrip('_')}{name}")
    return (name,)


# --- Annotations ---


def is_any(annotation: Any) -> bool:
    """True for annotations that accept every value."""
    return annotation is Any or annotation is object or annotation is inspect.Parameter.empty


def strip_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, *extras]`` into ``(T, extras)``."""
    if get_origin(annotation) is Annotated:
        inner, *extras = get_args(annotation)
        return inner, tuple(extras)
    return annotation, ()


def strip_classvar(annotation: Any) -> tuple[Any, bool]:
    """Split ``ClassVar[T]`` into ``(T, True)``; other annotations return ``(annotation, False)``."""
    if annotation is ClassVar:
        return Any, True
    if get_origin(annotation) is ClassVar:
        args = get_args(annotation)
        return (args[0] if args else Any), True
    if isinstance(annotation, str) and annotation.split("[", 1)[0] in ("ClassVar", "typing.ClassVar"):
        return Any, True
    return annotation, False


def union_members(annotation: Any) -> tuple[Any, ...] | None:
    """Members of ``X | Y`` / ``Union[X, Y]`` / ``Optional[X]``; None for non-unions."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        return get_args(annotation)
    return None


def runtime_class(annotation: Any) -> type | None:
    """Class an annotation checks against at runtime, if it has one.

    ``list[int]`` -> ``list``, ``Annotated[int, ...]`` -> ``int``, ``NewType`` -> its supertype.
    Unions, literals, and type variables have no single runtime class.
    """
    annotation, _ = strip_annotated(annotation)
    if union_members(annotation) is not None:
        return None
    supertype = getattr(annotation, "__supertype__", None)
    if supertype is not None:
        return runtime_class(supertype)
    origin = get_origin(annotation)
    if origin is not None:
        return origin if isinstance(origin, type) else None
    if isinstance(annotation, type):
        return annotation
    return None


def is_nullable(annotation: Any) -> bool:
    """True if None is an acceptable value for the annotation."""
    annotation, _ = strip_annotated(annotation)
    if is_any(annotation) or annotation is None or annotation is NoneType:
        return True
    if isinstance(annotation, TypeVar):
        return annotation.__bound__ is None or is_nullable(annotation.__bound__)
    members = union_members(annotation)
    if members is not None:
        return any(is_nullable(m) for m in members)
    if get_origin(annotation) is Literal:
        return None in get_args(annotation)
    return False


def is_assignable(value: Any, annotation: Any) -> bool:
    """True if ``value`` already satisfies ``annotation`` without conversion."""
    annotation, _ = strip_annotated(annotation)
    if is_any(annotation):
        return True
    if isinstance(annotation, str):
        return True  # Unresolvable forward reference
    if isinstance(annotation, TypeVar):
        bound = annotation.__bound__
        return bound is None or is_assignable(value, bound)
    members = union_members(annotation)
    if members is not None:
        return any(is_assignable(value, m) for m in members)
    if get_origin(annotation) is Literal:
        return value in get_args(annotation)
    cls = runtime_class(annotation)
    if cls is None:
        return False
    try:
        return isinstance(value, cls)
    except TypeError:
        return False  # Non-runtime-checkable protocol


def is_subtype(candidate: Any, expected: Any) -> bool:
    """Lenient static check: False only when both sides are classes and unrelated."""
    if is_any(candidate) or is_any(expected):
        return True
    candidate_cls, expected_cls = runtime_class(candidate), runtime_class(expected)
    if candidate_cls is None or expected_cls is None:
        return True
    try:
        return issubclass(candidate_cls, expected_cls)
    except TypeError:
        return True


# --- Signatures ---


def _evaluate(annotation: Any, globalns: dict[str, Any], localns: dict[str, Any]) -> Any:
    if annotation is None:
        return NoneType
    if not isinstance(annotation, str):
        return annotation
    # Class annotations are evaluated with ClassVar allowed
    holder = type("_Annotation", (), {"__annotations__": {"value": annotation}})
    try:
        return typing.get_type_hints(holder, globalns, localns, include_extras=True)["value"]
    except Exception:
        return Any


def resolve_hints(obj: Any, owner: type | None = None) -> dict[str, Any]:
    """Evaluated annotations of a function or class, extras preserved.

    Falls back to evaluating annotations one by one when some forward
    reference cannot be resolved; unresolvable ones become Any.

    Args:
        obj: Function or class whose annotations to evaluate.
        owner: Class whose namespace (and name) forward references may use.

    Returns:
        Mapping of annotated name to evaluated annotation.
    """
    localns: dict[str, Any] = {}
    if owner is not None:
        localns.update(vars(owner))
        localns[owner.__name__] = owner
    try:
        return typing.get_type_hints(obj, localns=localns, include_extras=True)
    except Exception:
        pass  # Some annotation is not evaluable; retry per annotation below
    try:
        raw = inspect.get_annotations(obj)
    except TypeError:
        return {}
    globalns = getattr(obj, "__globals__", None)
    if globalns is None:
        module = sys.modules.get(getattr(obj, "__module__", None) or "")
        globalns = vars(module) if module is not None else {}
    return {name: _evaluate(ann, globalns, localns) for name, ann in raw.items()}


def _unwrap(function: Any) -> Any:
    if isinstance(function, (staticmethod, classmethod)):
        return function.__func__
    return function


def specs_from_signature(
    signature: inspect.Signature,
    hints: dict[str, Any],
    globalns: dict[str, Any],
    localns: dict[str, Any],
    *,
    skip_first: bool = False,
) -> tuple[ParameterSpec, ...]:
    parameters = list(signature.parameters.values())
    if skip_first and parameters and parameters[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        parameters = parameters[1:]
    specs = []
    for p in parameters:
        if p.annotation is inspect.Parameter.empty:
            annotation: Any = Any
        elif p.name in hints:
            annotation = hints[p.name]
        else:
            annotation = _evaluate(p.annotation, globalns, localns)
        if annotation is None:
            annotation = NoneType
        specs.append(ParameterSpec(p.name, annotation, p.kind, p.default is not inspect.Parameter.empty))
    return tuple(specs)


def describe_callable(
    function: Any, owner: type | None = None, *, skip_first: bool = False
) -> tuple[tuple[ParameterSpec, ...], Any]:
    """Parameters (receiver excluded) and return annotation of a callable.

    Args:
        function: Function, staticmethod/classmethod object, or builtin.
        owner: Class the callable is declared in, for forward references.
        skip_first: Drop the leading self/cls parameter.

    Returns:
        Tuple of (parameters, return annotation). Callables the host cannot
        describe accept any positional arguments and return Any.
    """
    function = _unwrap(function)
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return UNKNOWN_PARAMETERS, Any
    hints = resolve_hints(function, owner) if inspect.isfunction(function) else {}
    globalns = getattr(function, "__globals__", {})
    localns = {owner.__name__: owner} if owner is not None else {}
    specs = specs_from_signature(signature, hints, globalns, localns, skip_first=skip_first)
    return specs, hints.get("return", Any)


def argument_types(args: tuple[Any, ...]) -> tuple[type, ...]:
    """Runtime types of call arguments, used as an exact-match signature."""
    return tuple(type(a) for a in args)


# --- Compatibility ---


def is_argument_compatible(value: Any, annotation: Any) -> bool:
    """Whether one argument can be passed for a parameter.

    Compatible when the value is None and the parameter is nullable, when the
    value already satisfies the annotation, or when converting it succeeds.
    """
    if value is None:
        return is_nullable(annotation)
    if is_assignable(value, annotation):
        return True
    # Late import to avoid circular dependency
    from reflectcache.core.conversion import can_convert_value

    return can_convert_value(value, annotation)


def accepts_arity(arity: tuple[int, int | None], count: int) -> bool:
    required, maximum = arity
    return count >= required and (maximum is None or count <= maximum)


def matches_signature(
    candidate: MethodDescriptor | ConstructorDescriptor, signature: tuple[Any, ...]
) -> bool:
    """Exact positional signature match, callable without keyword arguments."""
    return candidate.parameter_types == signature and not candidate.required_keywords


def is_candidate_compatible(
    candidate: MethodDescriptor | ConstructorDescriptor, args: tuple[Any, ...]
) -> bool:
    """Check a method/constructor candidate against runtime arguments.

    Args:
        candidate: Descriptor whose parameters are checked.
        args: Positional call arguments.

    Returns:
        True if the argument count fits, every argument is compatible, and no
        keyword-only parameter is left without a value.
    """
    if candidate.required_keywords:
        return False
    if not accepts_arity(candidate.arity, len(args)):
        return False
    positional = [p for p in candidate.parameters if p.is_positional]
    variadic = next(
        (p for p in candidate.parameters if p.kind == inspect.Parameter.VAR_POSITIONAL), None
    )
    for index, value in enumerate(args):
        if index < len(positional):
            annotation = positional[index].annotation
        else:
            annotation = variadic.annotation if variadic is not None else Any
        if not is_argument_compatible(value, annotation):
            return False
    return True
