"""Configuration module using Pydantic Settings.

Usage:
    from reflectcache.config import ReflectionSettings

    settings = ReflectionSettings(max_cache_entries=1024)
"""

from reflectcache.config.settings import ReflectionSettings

__all__ = [
    "ReflectionSettings",
]
