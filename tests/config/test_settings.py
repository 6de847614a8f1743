"""Tests for ReflectionSettings."""

import pytest
from pydantic import ValidationError

from reflectcache.config import ReflectionSettings


def test_defaults(monkeypatch):
    for name in ("MAX_CACHE_ENTRIES", "PRIORITY_SCOPES", "IMPORT_MISSING_MODULES"):
        monkeypatch.delenv(f"REFLECTCACHE_{name}", raising=False)

    settings = ReflectionSettings(_env_file=None)

    assert settings.max_cache_entries is None
    assert settings.priority_scopes == []
    assert settings.import_missing_modules is False


def test_environment_variables(monkeypatch):
    monkeypatch.setenv("REFLECTCACHE_MAX_CACHE_ENTRIES", "128")
    monkeypatch.setenv("REFLECTCACHE_PRIORITY_SCOPES", '["myapp.models", "myapp.views"]')
    monkeypatch.setenv("REFLECTCACHE_IMPORT_MISSING_MODULES", "true")

    settings = ReflectionSettings(_env_file=None)

    assert settings.max_cache_entries == 128
    assert settings.priority_scopes == ["myapp.models", "myapp.views"]
    assert settings.import_missing_modules is True


def test_explicit_values_override_environment(monkeypatch):
    monkeypatch.setenv("REFLECTCACHE_MAX_CACHE_ENTRIES", "128")

    settings = ReflectionSettings(_env_file=None, max_cache_entries=4)

    assert settings.max_cache_entries == 4


def test_unrelated_variables_are_ignored(monkeypatch):
    monkeypatch.setenv("REFLECTCACHE_UNKNOWN", "1")
    ReflectionSettings(_env_file=None)


def test_max_cache_entries_must_be_positive():
    with pytest.raises(ValidationError):
        ReflectionSettings(_env_file=None, max_cache_entries=0)
