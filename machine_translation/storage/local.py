"""
Local cache storage implementations.

These are in-memory or filesystem-based implementations
that work without any external services.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from machine_translation.storage.base import CacheStorage

logger = logging.getLogger(__name__)


def _now() -> float:
    return datetime.now(timezone.utc).timestamp()


# =============================================================================
# In-Memory Cache Storage
# =============================================================================


class InMemoryCacheStorage(CacheStorage):
    """In-memory cache, scoped to the process."""
    
    def __init__(self):
        self._cache: dict[str, tuple[Any, float | None]] = {}
    
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        expires_at = _now() + ttl if ttl else None
        self._cache[key] = (value, expires_at)
    
    async def get(self, key: str) -> Any | None:
        if key not in self._cache:
            return None
        
        value, expires_at = self._cache[key]
        if expires_at and _now() > expires_at:
            del self._cache[key]
            return None
        
        return value
    
    async def delete(self, key: str) -> bool:
        if key in self._cache:
            del self._cache[key]
            return True
        return False
    
    async def clear(self) -> None:
        self._cache.clear()
    
    def __len__(self) -> int:
        return len(self._cache)


# =============================================================================
# Local Filesystem Cache Storage
# =============================================================================


class FileCacheStorage(CacheStorage):
    """
    Store cache entries as JSON files, one per key.
    
    Survives restarts, so repeated runs over the same content don't
    spend provider quota twice.
    """
    
    def __init__(self, base_path: str | Path = "./data/cache"):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
    
    def _key_to_path(self, key: str) -> Path:
        safe_key = key.replace(":", "_").replace("/", "_")
        return self.base_path / f"{safe_key}.json"
    
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        entry = {
            "value": value,
            "expires_at": _now() + ttl if ttl else None,
        }
        path = self._key_to_path(key)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=self.base_path, suffix=".tmp", delete=False
        ) as f:
            json.dump(entry, f, ensure_ascii=False)
        os.replace(f.name, path)
    
    async def get(self, key: str) -> Any | None:
        path = self._key_to_path(key)
        try:
            entry = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except ValueError:
            logger.warning(f"Dropping unreadable cache entry {path.name}")
            path.unlink(missing_ok=True)
            return None
        
        if not isinstance(entry, dict):
            path.unlink(missing_ok=True)
            return None
        
        expires_at = entry.get("expires_at")
        if expires_at and _now() > expires_at:
            path.unlink(missing_ok=True)
            return None
        
        return entry.get("value")
    
    async def delete(self, key: str) -> bool:
        path = self._key_to_path(key)
        if path.exists():
            path.unlink()
            return True
        return False
    
    async def clear(self) -> None:
        for path in self.base_path.glob("*.json"):
            path.unlink(missing_ok=True)


# =============================================================================
# Factory
# =============================================================================


def create_cache_storage(cache_dir: str | Path | None = None) -> CacheStorage:
    """Create a filesystem cache when a directory is given, else in-memory."""
    if cache_dir:
        return FileCacheStorage(cache_dir)
    return InMemoryCacheStorage()
