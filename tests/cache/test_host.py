"""Tests for HostIntrospector live lookups."""

import collections
from dataclasses import dataclass, field
from typing import Annotated, ClassVar, overload

import pytest
from pydantic import BaseModel, ConfigDict, Field

from reflectcache.cache import HostIntrospector, Introspector
from reflectcache.core.metadata import BindingFlags, MethodBinding
from reflectcache.core.metadata.operations import accepts_arity


@dataclass
class Point:
    x: int = 0
    y: int = 0
    origin: ClassVar[str] = "center"
    _hidden: int = field(default=0, repr=False)


@dataclass(frozen=True)
class FrozenPoint:
    x: int = 0


@dataclass(kw_only=True)
class KwPoint:
    x: int
    y: int = 0


class Model(BaseModel):
    name: Annotated[str, "label"] = ""
    locked: int = Field(default=0, frozen=True)


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: int = 0


class Slotted:
    __slots__ = ("a", "b")


class Shapes:
    sides = 4
    __secret = "s"

    def __init__(self, size: int = 1):
        self._size = size

    @property
    def size(self) -> int:
        return self._size

    @size.setter
    def size(self, value: int) -> None:
        self._size = value

    @property
    def area(self) -> int:
        return self._size * self._size

    def grow(self, by: int) -> None:
        self._size += by

    @staticmethod
    def unit() -> "Shapes":
        return Shapes(1)

    @classmethod
    def of(cls, size: int) -> "Shapes":
        return cls(size)

    def _internal(self) -> None:
        pass


class Square(Shapes):
    sides = 4


class Painter:
    def paint(self, *, color: str) -> None:
        self.color = color


class Parser:
    @overload
    def parse(self, value: int) -> str: ...

    @overload
    def parse(self, value: str) -> str: ...

    def parse(self, value):
        return f"{type(value).__name__}:{value}"


class Pair:
    @overload
    def __init__(self, value: int) -> None: ...

    @overload
    def __init__(self, value: str) -> None: ...

    def __init__(self, value):
        self.value = value


@pytest.fixture
def host():
    return HostIntrospector()


def test_host_satisfies_protocol(host):
    assert isinstance(host, Introspector)


class TestFindType:
    def test_builtin_by_short_name(self, host):
        assert host.find_type("int") is int

    def test_qualified_name_in_loaded_module(self, host):
        assert host.find_type("collections.OrderedDict") is collections.OrderedDict

    def test_nested_qualname(self, host):
        assert host.find_type(f"{__name__}.Point") is Point

    def test_missing_type_is_none(self, host):
        assert host.find_type("collections.DoesNotExist") is None
        assert host.find_type("no_such_module_xyz.Thing") is None

    def test_non_type_attribute_is_not_a_match(self, host):
        assert host.find_type("collections.namedtuple") is None

    def test_priority_scope_resolves_relative_names(self):
        host = HostIntrospector(priority_scopes=(__name__,))
        assert host.find_type("Point") is Point

    def test_import_missing_modules(self, monkeypatch):
        import sys

        monkeypatch.delitem(sys.modules, "sched", raising=False)
        host = HostIntrospector(import_missing_modules=True)
        found = host.find_type("sched.scheduler")
        assert found is not None
        assert found.__name__ == "scheduler"

    def test_list_types_only_returns_classes_defined_in_module(self, host):
        import sys

        types = host.list_types(sys.modules[__name__])
        assert Point in types
        assert BaseModel not in types

    def test_list_types_of_non_module_raises_type_error(self, host):
        with pytest.raises(TypeError):
            host.list_types(42)


class TestFindField:
    def test_dataclass_field(self, host):
        found = host.find_field(Point, "x", BindingFlags.ALL)
        assert found is not None
        assert found.field_type is int
        assert not found.is_static
        assert found.declaring_type is Point

    def test_classvar_is_static(self, host):
        found = host.find_field(Point, "origin", BindingFlags.ALL)
        assert found is not None
        assert found.is_static
        assert found.field_type is str

    def test_plain_class_value_is_static(self, host):
        found = host.find_field(Shapes, "sides", BindingFlags.ALL)
        assert found is not None
        assert found.is_static
        assert found.field_type is int

    def test_flags_filter_visibility_and_scope(self, host):
        assert host.find_field(Point, "_hidden", BindingFlags.PUBLIC_INSTANCE) is None
        assert host.find_field(Point, "_hidden", BindingFlags.ALL) is not None
        assert host.find_field(Point, "origin", BindingFlags.PUBLIC_INSTANCE) is None
        assert host.find_field(Point, "x", BindingFlags.PUBLIC_STATIC) is None

    def test_mangled_private_field(self, host):
        found = host.find_field(Shapes, "__secret", BindingFlags.ALL)
        assert found is not None
        assert found.attribute_name == "_Shapes__secret"
        assert not found.is_public

    def test_inherited_field_and_declared_only(self, host):
        class Child(Point):
            pass

        assert host.find_field(Child, "x", BindingFlags.ALL).declaring_type is Point
        assert host.find_field(Child, "x", BindingFlags.ALL | BindingFlags.DECLARED_ONLY) is None

    def test_slots_are_instance_fields(self, host):
        found = host.find_field(Slotted, "a", BindingFlags.ALL)
        assert found is not None
        assert not found.is_static

    def test_methods_and_properties_are_not_fields(self, host):
        assert host.find_field(Shapes, "grow", BindingFlags.ALL) is None
        assert host.find_field(Shapes, "size", BindingFlags.ALL) is None
        assert host.find_field(Shapes, "__init__", BindingFlags.ALL) is None

    def test_frozen_dataclass_field_is_read_only(self, host):
        assert host.find_field(FrozenPoint, "x", BindingFlags.ALL).is_read_only
        assert not host.find_field(Point, "x", BindingFlags.ALL).is_read_only

    def test_pydantic_fields(self, host):
        name = host.find_field(Model, "name", BindingFlags.ALL)
        locked = host.find_field(Model, "locked", BindingFlags.ALL)
        frozen = host.find_field(FrozenModel, "value", BindingFlags.ALL)

        assert name.field_type is str
        assert name.metadata == ("label",)
        assert not name.is_read_only
        assert locked.is_read_only
        assert frozen.is_read_only


class TestFindProperty:
    def test_read_write_property(self, host):
        found = host.find_property(Shapes, "size", BindingFlags.ALL)
        assert found is not None
        assert found.property_type is int
        assert found.can_read and found.can_write

    def test_read_only_property(self, host):
        found = host.find_property(Shapes, "area", BindingFlags.ALL)
        assert found.can_read
        assert not found.can_write

    def test_properties_are_instance_members(self, host):
        assert host.find_property(Shapes, "size", BindingFlags.PUBLIC_STATIC) is None

    def test_non_property_is_none(self, host):
        assert host.find_property(Shapes, "grow", BindingFlags.ALL) is None


class TestFindMethod:
    def test_bindings(self, host):
        assert host.find_method(Shapes, "grow", BindingFlags.ALL, None).binding is MethodBinding.INSTANCE
        assert host.find_method(Shapes, "unit", BindingFlags.ALL, None).binding is MethodBinding.STATIC
        assert host.find_method(Shapes, "of", BindingFlags.ALL, None).binding is MethodBinding.CLASS

    def test_static_flags_exclude_instance_methods(self, host):
        assert host.find_method(Shapes, "grow", BindingFlags.PUBLIC_STATIC, None) is None
        assert host.find_method(Shapes, "of", BindingFlags.PUBLIC_STATIC, None) is not None

    def test_non_public_method(self, host):
        assert host.find_method(Shapes, "_internal", BindingFlags.PUBLIC_INSTANCE, None) is None
        assert host.find_method(Shapes, "_internal", BindingFlags.ALL, None) is not None

    def test_signature_selects_overload(self, host):
        by_str = host.find_method(Parser, "parse", BindingFlags.ALL, (str,))
        assert by_str is not None
        assert by_str.is_overload
        assert by_str.parameter_types == (str,)

    def test_no_signature_returns_implementation(self, host):
        found = host.find_method(Parser, "parse", BindingFlags.ALL, None)
        assert not found.is_overload

    def test_unmatched_signature_is_none(self, host):
        assert host.find_method(Parser, "parse", BindingFlags.ALL, (float,)) is None

    def test_exact_match_skips_required_keyword_only_parameters(self, host):
        assert host.find_method(Painter, "paint", BindingFlags.ALL, ()) is None
        assert host.find_method(Painter, "paint", BindingFlags.ALL, None).required_keywords == ("color",)

    def test_list_methods_in_declaration_order(self, host):
        group = host.list_methods(Parser, "parse", BindingFlags.ALL)
        assert [m.parameter_types for m in group] == [(int,), (str,)]

    def test_overload_calls_go_to_implementation(self, host):
        by_int = host.find_method(Parser, "parse", BindingFlags.ALL, (int,))
        assert by_int.invoke(Parser(), (5,)) == "int:5"


class TestFindConstructor:
    def test_init_signature(self, host):
        found = host.find_constructor(Shapes, BindingFlags.ALL, None)
        assert found.parameter_types == (int,)
        assert found.arity == (0, 1)

    def test_dataclass_constructor(self, host):
        found = host.find_constructor(Point, BindingFlags.ALL, (int, int, int))
        assert found is not None

    def test_keyword_only_constructor_has_no_exact_match(self, host):
        found = host.find_constructor(KwPoint, BindingFlags.ALL, None)

        assert found.parameter_types == ()
        assert found.required_keywords == ("x",)
        assert host.find_constructor(KwPoint, BindingFlags.ALL, ()) is None

    def test_overloaded_constructors(self, host):
        group = host.list_constructors(Pair, BindingFlags.ALL)
        assert [c.parameter_types for c in group] == [(int,), (str,)]

    def test_static_only_flags_see_no_constructor(self, host):
        assert host.find_constructor(Shapes, BindingFlags.PUBLIC_STATIC, None) is None

    def test_builtin_without_signature(self, host):
        found = host.find_constructor(int, BindingFlags.ALL, None)
        assert found is not None
        assert accepts_arity(found.arity, 1)


class TestListings:
    def test_static_field_names(self, host):
        assert host.static_field_names(Shapes) == ["sides"]

    def test_property_names(self, host):
        assert host.property_names(Shapes) == ["area", "size"]

    def test_method_names_are_public_instance_methods(self, host):
        assert host.method_names(Shapes) == ["grow"]

    def test_listings_include_inherited_members(self, host):
        assert "grow" in host.method_names(Square)
