"""
Translator service with caching.

Combines the DeepL client with the translation cache. Everything is
passed in explicitly; nothing is looked up from global state.
"""

from __future__ import annotations

import logging

import httpx

from machine_translation.config import Settings
from machine_translation.core.models import Translation
from machine_translation.i18n.cache import TranslationCache
from machine_translation.i18n.client import DeeplClient
from machine_translation.storage.base import CacheStorage
from machine_translation.storage.local import create_cache_storage

logger = logging.getLogger(__name__)


class Translator:
    """
    Main translation service.

    Usage:
        translator = Translator.from_settings(get_settings())

        # Batch
        translations = await translator.translate(["Hello", "Goodbye"], "de")

        # Single string
        de_text = await translator.translate_text("Hello", "de", source_lang="en")
    """

    def __init__(self, client: DeeplClient, cache: TranslationCache | None = None):
        self.client = client
        self.cache = cache or TranslationCache(enabled=False)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        storage: CacheStorage | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> Translator:
        """Wire a client and cache from settings."""
        if storage is None and settings.cache_enabled:
            storage = create_cache_storage(settings.cache_dir or None)

        return cls(
            client=DeeplClient.from_settings(settings, client=http_client),
            cache=TranslationCache(storage, enabled=settings.cache_enabled, ttl=settings.cache_ttl),
        )

    async def translate(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str | None = None,
    ) -> list[Translation]:
        """
        Translate a batch of strings, using the cache when enabled.

        Args:
            texts: Strings to translate, in order
            target_lang: Target language code
            source_lang: Source language (auto-detect if None)

        Returns:
            One Translation per input string, in input order
        """
        texts = list(texts)
        key = None

        if self.cache.enabled():
            key = self.cache.make_key(texts, target_lang, source_lang, self.client.options)
            cached = await self.cache.get(key)
            if cached is not None:
                return cached

        translations = await self.client.translate(texts, target_lang, source_lang)

        if key is not None:
            await self.cache.set(key, translations)

        return translations

    async def translate_text(self, text: str, target_lang: str, source_lang: str | None = None) -> str:
        """Translate one string."""
        if not text:
            return text
        translations = await self.translate([text], target_lang, source_lang)
        return translations[0].text
