"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the
reflection caches. Nothing requires these variables; defaults give an
unbounded cache that resolves types against loaded modules only.

Usage:
    from reflectcache.config import ReflectionSettings

    # Load from environment variables (REFLECTCACHE_*)
    settings = ReflectionSettings()

    # Or override with explicit values
    settings = ReflectionSettings(max_cache_entries=4096, priority_scopes=["myapp.models"])
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReflectionSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the reflection caches.

    Attributes:
        max_cache_entries: Per-table LRU bound (None keeps entries until reset).
        priority_scopes: Module names searched first when resolving type names.
        import_missing_modules: Import the module part of a dotted type name
            when it is not loaded yet.

    Environment Variables:
        REFLECTCACHE_MAX_CACHE_ENTRIES
        REFLECTCACHE_PRIORITY_SCOPES (JSON list, e.g. '["myapp.models"]')
        REFLECTCACHE_IMPORT_MISSING_MODULES
    """

    model_config = SettingsConfigDict(
        env_prefix="REFLECTCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_cache_entries: int | None = Field(default=None, ge=1)
    priority_scopes: list[str] = Field(default_factory=list)
    import_missing_modules: bool = False
