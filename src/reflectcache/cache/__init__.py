"""Cache layer: the store, the introspector protocol, and the host introspector."""

from reflectcache.cache.host import HostIntrospector
from reflectcache.cache.protocol import Introspector
from reflectcache.cache.store import TABLE_NAMES, CacheGeneration, CacheStore, LRUTable, TableName

__all__ = [
    "Introspector",
    "HostIntrospector",
    "CacheStore",
    "CacheGeneration",
    "LRUTable",
    "TableName",
    "TABLE_NAMES",
]
