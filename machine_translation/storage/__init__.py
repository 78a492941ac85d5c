"""
Cache storage for provider responses.

- CacheStorage: the contract the translator relies on
- InMemoryCacheStorage / FileCacheStorage: local implementations
"""

from machine_translation.storage.base import CacheStorage
from machine_translation.storage.local import (
    InMemoryCacheStorage,
    FileCacheStorage,
    create_cache_storage,
)

__all__ = [
    "CacheStorage",
    "InMemoryCacheStorage",
    "FileCacheStorage",
    "create_cache_storage",
]
