"""Tests for TypeRegistry resolution and enumeration."""

import collections
import logging
import sys
import types

import pytest

from reflectcache import InvalidArgumentError


class Widget:
    pass


class Gadget(Widget):
    pass


WIDGET_NAME = f"{__name__}.Widget"


def test_resolves_qualified_name(reflector):
    assert reflector.resolve_type("collections.OrderedDict") is collections.OrderedDict
    assert reflector.resolve_type(WIDGET_NAME) is Widget


def test_resolution_is_idempotent(reflector, introspector):
    """CRITICAL: Repeated resolution returns the same type with one live lookup.

    Why: Type lookups scan every loaded module; the cache exists to avoid it.
    """
    first = reflector.resolve_type(WIDGET_NAME)
    second = reflector.resolve_type(WIDGET_NAME)

    assert first is second is Widget
    assert introspector.find_type.call_count == 1


def test_not_found_is_cached(reflector, introspector):
    """Negative results are cached under the same key."""
    assert reflector.resolve_type("nowhere.Missing") is None
    assert reflector.resolve_type("nowhere.Missing") is None
    assert introspector.find_type.call_count == 1


@pytest.mark.parametrize("name", [None, ""])
def test_empty_name_short_circuits(reflector, introspector, name):
    assert reflector.resolve_type(name) is None
    assert introspector.find_type.call_count == 0
    assert reflector.store.sizes()["types"] == 0


def test_non_string_name_is_invalid(reflector):
    with pytest.raises(InvalidArgumentError):
        reflector.resolve_type(42)


def test_key_is_the_exact_input_string(reflector, introspector):
    """No normalization: differently spelled names are cached separately."""
    reflector.resolve_type(WIDGET_NAME)
    reflector.resolve_type(f" {WIDGET_NAME}")

    assert introspector.find_type.call_count == 2


def test_reset_forces_new_lookup(reflector, introspector):
    reflector.resolve_type(WIDGET_NAME)
    reflector.clear_all_caches()
    reflector.resolve_type(WIDGET_NAME)

    assert introspector.find_type.call_count == 2


class TestGetTypes:
    def test_by_module_object(self, reflector):
        found = reflector.get_types(sys.modules[__name__])
        assert Widget in found
        assert Gadget in found

    def test_by_module_name_with_predicate(self, reflector):
        found = reflector.get_types(__name__, lambda t: issubclass(t, Widget) and t is not Widget)
        assert found == [Gadget]

    def test_none_module_is_invalid(self, reflector):
        with pytest.raises(InvalidArgumentError):
            reflector.get_types(None)

    def test_unknown_module_name_is_invalid(self, reflector):
        with pytest.raises(InvalidArgumentError):
            reflector.get_types("no_such_module_xyz")


class TestGetAllTypes:
    def test_includes_types_from_every_loaded_module(self, reflector):
        found = set(reflector.get_all_types())
        assert Widget in found
        assert collections.OrderedDict in found

    def test_predicate_filters(self, reflector):
        found = list(reflector.get_all_types(lambda t: t is Gadget))
        assert found == [Gadget]

    def test_unenumerable_module_is_skipped_with_warning(self, reflector, introspector, caplog):
        broken = types.SimpleNamespace()  # No __name__, not a module
        introspector.loaded_modules.side_effect = lambda: [broken, sys.modules[__name__]]

        with caplog.at_level(logging.WARNING, logger="reflectcache.reflection.types"):
            found = list(reflector.get_all_types())

        assert Widget in found
        assert "cannot enumerate types" in caplog.text
