"""Reflector: explicit owner of the caches and the reflection services.

Usage:
    reflector = Reflector()
    Point = reflector.resolve_type("myapp.geometry.Point")
    get_x = reflector.compile_getter(Point, "x", int)
    p = reflector.create_instance(Point)
    reflector.invoke(p, "translate", 1, 2)
    reflector.clear_all_caches()

    # Process-wide default
    get_reflector().resolve_type("collections.OrderedDict")
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator, Sequence
from types import ModuleType
from typing import Any

from reflectcache.cache.host import HostIntrospector
from reflectcache.cache.protocol import Introspector
from reflectcache.cache.store import CacheStore
from reflectcache.config.settings import ReflectionSettings
from reflectcache.core.conversion import convert_to, try_convert
from reflectcache.core.metadata.models import (
    DEFAULT_CONSTRUCTOR_FLAGS,
    DEFAULT_MEMBER_FLAGS,
    BindingFlags,
    ConstructorDescriptor,
    FieldDescriptor,
    MethodDescriptor,
    PropertyDescriptor,
)
from reflectcache.core.types import Getter, Setter
from reflectcache.reflection.accessors import AccessorCompiler
from reflectcache.reflection.attributes import AttributeInspector
from reflectcache.reflection.dispatch import InvocationDispatcher
from reflectcache.reflection.members import MemberMetadataCache
from reflectcache.reflection.types import TypeRegistry


class Reflector:
    """Facade wiring one cache store to the five reflection services.

    Args:
        settings: Optional settings; loaded from the environment when omitted.
        introspector: Live lookup facility; a HostIntrospector built from
            the settings when omitted.
    """

    def __init__(
        self,
        settings: ReflectionSettings | None = None,
        introspector: Introspector | None = None,
    ):
        """Initialize reflector.

        Args:
            settings: Cache bound and type resolution options.
            introspector: Custom introspector (tests wrap the host one to count calls).
        """
        self.settings = settings if settings is not None else ReflectionSettings()
        if introspector is None:
            introspector = HostIntrospector(
                priority_scopes=self.settings.priority_scopes,
                import_missing_modules=self.settings.import_missing_modules,
            )
        self.introspector = introspector
        self.store = CacheStore(max_entries=self.settings.max_cache_entries)
        self.types = TypeRegistry(self.store, self.introspector)
        self.members = MemberMetadataCache(self.store, self.introspector)
        self.accessors = AccessorCompiler(self.store, self.members)
        self.dispatcher = InvocationDispatcher(self.store, self.members)
        self.attributes = AttributeInspector(self.members)

    # --- Types ---

    def resolve_type(self, name: str | None) -> type | None:
        return self.types.resolve(name)

    def get_types(
        self, module: ModuleType | str | None, predicate: Callable[[type], bool] | None = None
    ) -> list[type]:
        return self.types.get_types(module, predicate)

    def get_all_types(self, predicate: Callable[[type], bool] | None = None) -> Iterator[type]:
        return self.types.get_all_types(predicate)

    # --- Members ---

    def resolve_field(
        self, owner: type, name: str, flags: BindingFlags = DEFAULT_MEMBER_FLAGS
    ) -> FieldDescriptor | None:
        return self.members.resolve_field(owner, name, flags)

    def resolve_property(
        self, owner: type, name: str, flags: BindingFlags = DEFAULT_MEMBER_FLAGS
    ) -> PropertyDescriptor | None:
        return self.members.resolve_property(owner, name, flags)

    def resolve_method(
        self,
        owner: type,
        name: str,
        parameter_types: Sequence[Any] | None = None,
        flags: BindingFlags = DEFAULT_MEMBER_FLAGS,
    ) -> MethodDescriptor | None:
        return self.members.resolve_method(owner, name, parameter_types, flags)

    def resolve_constructor(
        self,
        owner: type,
        parameter_types: Sequence[Any] | None = None,
        flags: BindingFlags = DEFAULT_CONSTRUCTOR_FLAGS,
    ) -> ConstructorDescriptor | None:
        return self.members.resolve_constructor(owner, parameter_types, flags)

    def get_static_field_names(self, owner: type) -> list[str]:
        return self.members.get_static_field_names(owner)

    def get_property_names(self, owner: type) -> list[str]:
        return self.members.get_property_names(owner)

    def get_method_names(self, owner: type) -> list[str]:
        return self.members.get_method_names(owner)

    # --- Accessors ---

    def compile_getter[R](self, owner: type, member: str, result_type: type[R] | Any = Any) -> Getter[R]:
        return self.accessors.compile_getter(owner, member, result_type)

    def compile_setter[V](self, owner: type, member: str, value_type: type[V] | Any = Any) -> Setter[V]:
        return self.accessors.compile_setter(owner, member, value_type)

    # --- Invocation ---

    def create_instance[T](self, owner: type[T], *args: Any) -> T:
        return self.dispatcher.create_instance(owner, *args)

    def invoke(self, target: Any, method_name: str, *args: Any) -> Any:
        return self.dispatcher.invoke(target, method_name, *args)

    def invoke_static(self, owner: type, method_name: str, *args: Any) -> Any:
        return self.dispatcher.invoke_static(owner, method_name, *args)

    def create_bound_invoker(
        self, target: Any, method: MethodDescriptor, shape: Any = None
    ) -> Callable[..., Any]:
        return self.dispatcher.create_bound_invoker(target, method, shape)

    # --- Attributes ---

    def get_attribute[A](self, target: Any, attr_type: type[A], inherit: bool = False) -> A | None:
        return self.attributes.get_attribute(target, attr_type, inherit)

    def get_attributes[A](self, target: Any, attr_type: type[A], inherit: bool = False) -> list[A]:
        return self.attributes.get_attributes(target, attr_type, inherit)

    def has_attribute(self, target: Any, attr_type: type, inherit: bool = False) -> bool:
        return self.attributes.has_attribute(target, attr_type, inherit)

    # --- Conversion ---

    def try_convert(self, value: Any, target: Any) -> tuple[bool, Any]:
        return try_convert(value, target)

    def convert_to(self, value: Any, target: Any) -> Any:
        return convert_to(value, target)

    # --- Reset ---

    def clear_all_caches(self) -> None:
        """Atomically discard every cached type, member, accessor, factory, and invoker."""
        self.store.clear_all()


_default: Reflector | None = None
_default_lock = threading.Lock()


def get_reflector() -> Reflector:
    """Get the process-wide default Reflector, creating it if necessary."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = Reflector()
    return _default
