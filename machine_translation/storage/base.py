"""
Storage abstraction layer.

Translation results are cached through this interface. This allows
swapping implementations (in-memory, local filesystem, Redis, ...)
without changing the translator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class CacheStorage(ABC):
    """
    Key-value cache for provider responses.
    
    Values are JSON-compatible (lists of dicts). Implementations must
    tolerate concurrent readers and writers.
    """
    
    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Set a value with optional TTL in seconds."""
        pass
    
    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Get a value."""
        pass
    
    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key."""
        pass
    
    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry."""
        pass
    
    async def exists(self, key: str) -> bool:
        """Check if key exists."""
        return await self.get(key) is not None
