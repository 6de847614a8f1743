"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from unittest.mock import MagicMock

from reflectcache import CacheStore, HostIntrospector, ReflectionSettings, Reflector


@pytest.fixture
def settings():
    """Settings that ignore the environment and any .env file."""
    return ReflectionSettings(_env_file=None, max_cache_entries=None, priority_scopes=[])


@pytest.fixture
def store():
    """Fresh unbounded CacheStore."""
    return CacheStore()


@pytest.fixture
def introspector():
    """HostIntrospector wrapped so tests can count live lookups."""
    return MagicMock(wraps=HostIntrospector())


@pytest.fixture
def reflector(settings, introspector):
    """Reflector over the counting introspector."""
    return Reflector(settings=settings, introspector=introspector)
