"""Tests for conversion plans and runtime coercion."""

import sys
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any, Optional

import pytest

from reflectcache.core.conversion import (
    build_converter,
    can_convert_value,
    convert_to,
    identity,
    try_convert,
)


class Color(Enum):
    RED = 1
    GREEN = 2


class Level(IntEnum):
    LOW = 1
    HIGH = 2


class Animal:
    pass


class Dog(Animal):
    pass


class TestTryConvert:
    def test_instance_passes_through_unchanged(self):
        value = Dog()
        assert try_convert(value, Animal) == (True, value)

    def test_none_for_nullable_target(self):
        assert try_convert(None, Optional[int]) == (True, None)
        assert try_convert(None, Animal | None) == (True, None)

    def test_none_for_non_nullable_target_fails(self):
        assert try_convert(None, int) == (False, None)

    def test_numeric_string_to_int(self):
        assert try_convert("42", int) == (True, 42)

    def test_non_numeric_string_to_int_fails(self):
        assert try_convert("forty-two", int) == (False, None)

    def test_enum_by_name_is_case_insensitive(self):
        assert try_convert("red", Color) == (True, Color.RED)
        assert try_convert("GREEN", Color) == (True, Color.GREEN)

    def test_enum_by_value(self):
        assert try_convert(2, Color) == (True, Color.GREEN)

    def test_unknown_enum_name_fails(self):
        ok, _ = try_convert("blue", Color)
        assert not ok

    def test_plain_class_without_schema_fails_cleanly(self):
        ok, value = try_convert("rex", Dog)
        assert not ok
        assert value is None

    def test_any_target_accepts_everything(self):
        marker = object()
        assert try_convert(marker, Any) == (True, marker)


class TestConvertTo:
    def test_success_returns_value(self):
        assert convert_to("3.5", float) == 3.5

    def test_failure_raises_type_error(self):
        with pytest.raises(TypeError, match="Cannot convert str to int"):
            convert_to("nope", int)

    def test_none_failure_names_none(self):
        with pytest.raises(TypeError, match="Cannot convert None"):
            convert_to(None, int)

    def test_can_convert_value(self):
        assert can_convert_value("1", int)
        assert not can_convert_value(object(), int)


class TestBuildConverter:
    def test_same_type_is_identity(self):
        assert build_converter(int, int) is identity

    def test_subclass_is_identity(self):
        assert build_converter(Dog, Animal) is identity
        assert build_converter(bool, int) is identity

    def test_any_target_is_identity(self):
        assert build_converter(str, Any) is identity
        assert build_converter(str, object) is identity

    def test_int_to_float_widens(self):
        convert = build_converter(int, float)
        assert convert is not None
        assert convert(5) == 5.0
        assert isinstance(convert(5), float)

    def test_float_to_int_truncates(self):
        convert = build_converter(float, int)
        assert convert is not None
        assert convert(3.9) == 3

    @pytest.mark.parametrize("value", [0, -1, sys.maxsize, -sys.maxsize - 1])
    def test_int_boundaries_survive_int_to_int(self, value):
        assert build_converter(int, int)(value) == value

    def test_decimal_to_float(self):
        convert = build_converter(Decimal, float)
        assert convert is not None
        assert convert(Decimal("1.5")) == 1.5

    def test_complex_to_real_is_illegal(self):
        assert build_converter(complex, float) is None

    def test_unrelated_types_have_no_plan(self):
        """Why: an illegal conversion must fail when the accessor is compiled, not when it runs."""
        assert build_converter(str, int) is None
        assert build_converter(int, str) is None

    def test_downcast_checks_at_runtime(self):
        convert = build_converter(Animal, Dog)
        assert convert is not None

        dog = Dog()
        assert convert(dog) is dog
        with pytest.raises(TypeError):
            convert(Animal())

    def test_enum_to_int(self):
        convert = build_converter(Color, int)
        assert convert is not None
        assert convert(Color.GREEN) == 2

    def test_int_to_enum(self):
        convert = build_converter(int, Color)
        assert convert is not None
        assert convert(1) is Color.RED

    def test_int_enum_to_int_is_identity(self):
        assert build_converter(Level, int) is identity

    def test_optional_target_accepts_member_type(self):
        assert build_converter(int, Optional[int]) is identity

    def test_optional_source_to_member_type(self):
        assert build_converter(Optional[int], int) is identity

    def test_union_without_legal_member_has_no_plan(self):
        assert build_converter(str, int | float) is None

    def test_unknown_source_is_checked_per_value(self):
        convert = build_converter(Any, int)
        assert convert is not None
        assert convert("7") == 7
        with pytest.raises(TypeError):
            convert("seven")
