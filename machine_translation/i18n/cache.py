"""
Translation cache.

Memoizes provider calls. The key is a hash of everything that affects the
provider's answer: the exact batch (order included), both languages and
every tuning option. Changing any of them is a cache miss.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any

from machine_translation.config import ProviderOptions
from machine_translation.core.models import Translation
from machine_translation.storage.base import CacheStorage

logger = logging.getLogger(__name__)


class TranslationCache:
    """
    Hash-keyed cache of provider responses on top of a CacheStorage.
    
    A cache without storage, or created with enabled=False, is disabled:
    it never reads and never writes.
    """
    
    KEY_PREFIX = "translate"
    
    def __init__(
        self,
        storage: CacheStorage | None = None,
        enabled: bool = True,
        ttl: int | None = None,
    ):
        self._storage = storage
        self._enabled = enabled
        self.ttl = ttl
    
    def enabled(self) -> bool:
        return self._enabled and self._storage is not None
    
    @staticmethod
    def make_key(
        texts: list[str],
        target_lang: str,
        source_lang: str | None,
        options: ProviderOptions | dict[str, Any],
    ) -> str:
        """Create a deterministic cache key for one provider call."""
        if isinstance(options, ProviderOptions):
            options = options.model_dump()
        content = json.dumps(
            {
                "text": list(texts),
                "target_lang": target_lang,
                "source_lang": source_lang,
                "options": options,
            },
            sort_keys=True,
            ensure_ascii=False,
        )
        return hashlib.sha256(content.encode("utf-8")).hexdigest()
    
    async def get(self, key: str) -> list[Translation] | None:
        """Get cached translations."""
        if not self.enabled():
            return None
        
        cached = await self._storage.get(f"{self.KEY_PREFIX}:{key}")
        if cached is None:
            return None
        
        logger.debug(f"Translation cache hit: {key[:12]}")
        return [Translation.model_validate(item) for item in cached]
    
    async def set(self, key: str, translations: list[Translation]) -> None:
        """Cache translations."""
        if not self.enabled():
            return
        
        await self._storage.set(
            f"{self.KEY_PREFIX}:{key}",
            [t.model_dump() for t in translations],
            ttl=self.ttl,
        )
