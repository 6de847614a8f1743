"""Host introspector: live lookups against the running interpreter.

Types come from builtins, configured priority scopes, and ``sys.modules``.
Members come from class namespaces along the MRO:

    fields:       annotations (dataclass, pydantic, plain), __slots__, class-level values
    properties:   ``property`` objects
    methods:      functions, staticmethod, classmethod (plus ``typing.overload`` signatures)
    constructors: the class call signature (plus ``__init__`` overloads)

Usage:
    introspector = HostIntrospector(priority_scopes=("myapp.models",))
    reflector = Reflector(introspector=introspector)
"""

from __future__ import annotations

import builtins
import importlib
import inspect
import sys
import typing
from collections.abc import Sequence
from types import ModuleType
from typing import Any

from reflectcache.core.metadata.models import (
    BindingFlags,
    ConstructorDescriptor,
    FieldDescriptor,
    MethodBinding,
    MethodDescriptor,
    PropertyDescriptor,
)
from reflectcache.core.metadata.operations import (
    UNKNOWN_PARAMETERS,
    attribute_names,
    describe_callable,
    is_dunder,
    is_public_name,
    matches_signature,
    resolve_hints,
    specs_from_signature,
    strip_annotated,
    strip_classvar,
)

_MISSING = object()


def _is_pydantic(cls: type) -> bool:
    """True for pydantic models, whose frozen flags and field metadata live in ``model_fields``."""
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def _walk(root: Any, dotted: str) -> type | None:
    obj = root
    for part in dotted.split("."):
        try:
            obj = getattr(obj, part)
        except (AttributeError, ImportError):
            return None
    return obj if isinstance(obj, type) else None


def _search_order(owner: type, flags: BindingFlags) -> tuple[type, ...]:
    if flags & BindingFlags.DECLARED_ONLY:
        return (owner,)
    return owner.__mro__


def _own_annotations(klass: type) -> dict[str, Any]:
    try:
        return inspect.get_annotations(klass)
    except TypeError:
        return {}


def _slot_names(klass: type) -> tuple[str, ...]:
    slots = klass.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        return (slots,)
    return tuple(slots)


def _is_plain_value(value: Any) -> bool:
    # Functions, properties, slot members and nested classes are not fields
    return not isinstance(value, type) and not hasattr(type(value), "__get__")


def _is_frozen(klass: type, attribute_name: str) -> bool:
    params = klass.__dict__.get("__dataclass_params__")
    if params is not None and params.frozen:
        return True
    if _is_pydantic(klass):
        if klass.model_config.get("frozen", False):
            return True
        info = klass.model_fields.get(attribute_name)
        return bool(info is not None and info.frozen)
    return False


class HostIntrospector:
    """Introspector backed by ``inspect``, ``typing`` and ``sys.modules``.

    Args:
        priority_scopes: Module names searched, in order, for names relative to them.
        import_missing_modules: Import the longest importable prefix of a dotted
            name when it is not found among loaded modules.
    """

    def __init__(
        self,
        priority_scopes: Sequence[str] = (),
        import_missing_modules: bool = False,
    ) -> None:
        """Initialize host introspector.

        Args:
            priority_scopes: Module names searched first for relative names.
            import_missing_modules: Allow importing modules during type resolution.
        """
        self._priority_scopes = tuple(priority_scopes)
        self._import_missing_modules = import_missing_modules

    # --- Types ---

    def find_type(self, name: str) -> type | None:
        """Resolve a type: default scope first, then every loaded module in order."""
        found = self._find_in_default_scope(name)
        if found is not None:
            return found
        for module_name, module in list(sys.modules.items()):
            if module is None or not name.startswith(module_name + "."):
                continue
            found = _walk(module, name[len(module_name) + 1 :])
            if found is not None:
                return found
        return None

    def _find_in_default_scope(self, name: str) -> type | None:
        if "." not in name:
            candidate = getattr(builtins, name, None)
            if isinstance(candidate, type):
                return candidate
        for scope in self._priority_scopes:
            module = sys.modules.get(scope)
            if module is None:
                continue
            found = _walk(module, name)
            if found is not None:
                return found
        if self._import_missing_modules and "." in name:
            return self._import_and_walk(name)
        return None

    def _import_and_walk(self, name: str) -> type | None:
        parts = name.split(".")
        for split in range(len(parts) - 1, 0, -1):
            try:
                module = importlib.import_module(".".join(parts[:split]))
            except ImportError:
                continue
            return _walk(module, ".".join(parts[split:]))
        return None

    def find_module(self, name: str) -> ModuleType | None:
        return sys.modules.get(name)

    def loaded_modules(self) -> list[Any]:
        return [m for m in list(sys.modules.values()) if m is not None]

    def list_types(self, module: Any) -> list[type]:
        namespace = vars(module)
        module_name = module.__name__
        return [
            obj
            for obj in list(namespace.values())
            if isinstance(obj, type) and obj.__module__ == module_name
        ]

    # --- Fields ---

    def find_field(self, owner: type, name: str, flags: BindingFlags) -> FieldDescriptor | None:
        """Find a field along the MRO; the first declaring class decides visibility."""
        if is_dunder(name):
            return None
        public = is_public_name(name)
        for klass in _search_order(owner, flags):
            for attribute_name in attribute_names(klass, name):
                found = self._field_in(klass, name, attribute_name, public)
                if found is None:
                    continue
                if not flags.admits(public=public, static=found.is_static):
                    return None
                return found
        return None

    def _field_in(
        self, klass: type, name: str, attribute_name: str, public: bool
    ) -> FieldDescriptor | None:
        annotations = _own_annotations(klass)
        if attribute_name in annotations:
            hint = resolve_hints(klass, klass).get(attribute_name, annotations[attribute_name])
            declared, extras = strip_annotated(hint)
            declared, is_classvar = strip_classvar(declared)
            declared, more_extras = strip_annotated(declared)
            metadata = extras + more_extras
            if _is_pydantic(klass) and attribute_name in klass.model_fields:
                metadata = tuple(klass.model_fields[attribute_name].metadata)
            return FieldDescriptor(
                name=name,
                declaring_type=klass,
                field_type=Any if isinstance(declared, str) else declared,
                is_static=is_classvar,
                is_public=public,
                attribute_name=attribute_name,
                is_read_only=not is_classvar and _is_frozen(klass, attribute_name),
                metadata=metadata,
            )
        if attribute_name in _slot_names(klass):
            return FieldDescriptor(
                name=name,
                declaring_type=klass,
                field_type=Any,
                is_static=False,
                is_public=public,
                attribute_name=attribute_name,
            )
        value = klass.__dict__.get(attribute_name, _MISSING)
        if value is not _MISSING and _is_plain_value(value):
            return FieldDescriptor(
                name=name,
                declaring_type=klass,
                field_type=Any if value is None else type(value),
                is_static=True,
                is_public=public,
                attribute_name=attribute_name,
            )
        return None

    # --- Properties ---

    def find_property(
        self, owner: type, name: str, flags: BindingFlags
    ) -> PropertyDescriptor | None:
        public = is_public_name(name)
        for klass in _search_order(owner, flags):
            for attribute_name in attribute_names(klass, name):
                value = klass.__dict__.get(attribute_name, _MISSING)
                if value is _MISSING:
                    continue
                if not isinstance(value, property) or not flags.admits(public=public, static=False):
                    return None  # Shadowed by a non-property, or not visible
                hints = resolve_hints(value.fget, klass) if value.fget is not None else {}
                return PropertyDescriptor(
                    name=name,
                    declaring_type=klass,
                    property_type=hints.get("return", Any),
                    fget=value.fget,
                    fset=value.fset,
                    is_public=public,
                )
        return None

    # --- Methods ---

    def _locate_method(
        self, owner: type, name: str, flags: BindingFlags
    ) -> tuple[type, Any, MethodBinding] | None:
        public = is_public_name(name)
        for klass in _search_order(owner, flags):
            for attribute_name in attribute_names(klass, name):
                raw = klass.__dict__.get(attribute_name, _MISSING)
                if raw is _MISSING:
                    continue
                if isinstance(raw, staticmethod):
                    binding, function = MethodBinding.STATIC, raw.__func__
                elif isinstance(raw, classmethod):
                    binding, function = MethodBinding.CLASS, raw.__func__
                elif inspect.isroutine(raw):
                    binding, function = MethodBinding.INSTANCE, raw
                else:
                    return None  # Shadowed by a non-method
                if not flags.admits(public=public, static=binding is not MethodBinding.INSTANCE):
                    return None
                return klass, function, binding
        return None

    def _describe_methods(
        self, owner: type, name: str, flags: BindingFlags
    ) -> tuple[MethodDescriptor | None, tuple[MethodDescriptor, ...]]:
        located = self._locate_method(owner, name, flags)
        if located is None:
            return None, ()
        klass, function, binding = located
        skip_first = binding is not MethodBinding.STATIC

        def describe(source: Any, is_overload: bool) -> MethodDescriptor:
            parameters, return_type = describe_callable(source, klass, skip_first=skip_first)
            return MethodDescriptor(
                name=name,
                declaring_type=klass,
                function=function,
                binding=binding,
                parameters=parameters,
                return_type=return_type,
                is_public=is_public_name(name),
                is_overload=is_overload,
            )

        implementation = describe(function, False)
        stubs = typing.get_overloads(function) if inspect.isfunction(function) else []
        if not stubs:
            return implementation, (implementation,)
        return implementation, tuple(describe(stub, True) for stub in stubs)

    def find_method(
        self,
        owner: type,
        name: str,
        flags: BindingFlags,
        signature: tuple[Any, ...] | None,
    ) -> MethodDescriptor | None:
        implementation, candidates = self._describe_methods(owner, name, flags)
        if signature is None:
            return implementation
        return next((c for c in candidates if matches_signature(c, signature)), None)

    def list_methods(
        self, owner: type, name: str, flags: BindingFlags
    ) -> tuple[MethodDescriptor, ...]:
        return self._describe_methods(owner, name, flags)[1]

    # --- Constructors ---

    def _implementation_constructor(self, owner: type) -> ConstructorDescriptor:
        try:
            signature = inspect.signature(owner)
        except (TypeError, ValueError):
            return ConstructorDescriptor(declaring_type=owner, parameters=UNKNOWN_PARAMETERS)
        init = owner.__init__ if owner.__init__ is not object.__init__ else owner.__new__
        hints = resolve_hints(init, owner) if inspect.isfunction(init) else {}
        globalns = getattr(init, "__globals__", {})
        parameters = specs_from_signature(signature, hints, globalns, {owner.__name__: owner})
        return ConstructorDescriptor(declaring_type=owner, parameters=parameters)

    def _describe_constructors(
        self, owner: type, flags: BindingFlags
    ) -> tuple[ConstructorDescriptor | None, tuple[ConstructorDescriptor, ...]]:
        if not flags.admits(public=True, static=False):
            return None, ()
        implementation = self._implementation_constructor(owner)
        init = owner.__init__
        stubs = typing.get_overloads(init) if inspect.isfunction(init) else []
        if not stubs:
            return implementation, (implementation,)
        overloads = tuple(
            ConstructorDescriptor(
                declaring_type=owner,
                parameters=describe_callable(stub, owner, skip_first=True)[0],
                is_overload=True,
            )
            for stub in stubs
        )
        return implementation, overloads

    def find_constructor(
        self, owner: type, flags: BindingFlags, signature: tuple[Any, ...] | None
    ) -> ConstructorDescriptor | None:
        implementation, candidates = self._describe_constructors(owner, flags)
        if signature is None:
            return implementation
        return next((c for c in candidates if matches_signature(c, signature)), None)

    def list_constructors(
        self, owner: type, flags: BindingFlags
    ) -> tuple[ConstructorDescriptor, ...]:
        return self._describe_constructors(owner, flags)[1]

    # --- Listings ---

    def _public_names(self, owner: type) -> list[str]:
        return [n for n in dir(owner) if not n.startswith("_")]

    def static_field_names(self, owner: type) -> list[str]:
        return [
            n
            for n in self._public_names(owner)
            if self.find_field(owner, n, BindingFlags.PUBLIC_STATIC) is not None
        ]

    def property_names(self, owner: type) -> list[str]:
        return [
            n
            for n in self._public_names(owner)
            if self.find_property(owner, n, BindingFlags.PUBLIC_INSTANCE) is not None
        ]

    def method_names(self, owner: type) -> list[str]:
        return [
            n
            for n in self._public_names(owner)
            if self._locate_method(owner, n, BindingFlags.PUBLIC_INSTANCE) is not None
        ]
