"""
DeepL API client.

Sends batches of strings to DeepL's /v2/translate endpoint and returns
one Translation per input string, in input order.

Setup:
    1. Create an API key at https://www.deepl.com/your-account/keys
    2. Set DEEPL_AUTH_KEY=... in the environment or .env
    Free-tier keys (ending in ":fx") are routed to the free API host.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from machine_translation.config import ProviderOptions, Settings
from machine_translation.core.errors import ConfigurationError, ProviderError
from machine_translation.core.models import Translation

logger = logging.getLogger(__name__)


class DeeplClient:
    """
    Translation provider client.

    Usage:
        client = DeeplClient(auth_key="...:fx")
        translations = await client.translate(["Hello"], "de")
        translations[0].text  # -> "Hallo"
    """

    API_DOMAIN = "api.deepl.com"
    API_FREE_DOMAIN = "api-free.deepl.com"
    FREE_KEY_SUFFIX = ":fx"
    AUTH_SCHEME = "DeepL-Auth-Key"
    FALLBACK_ERROR = "Fatal error with DeepL API"

    def __init__(
        self,
        auth_key: str,
        options: ProviderOptions | None = None,
        *,
        api_domain: str | None = None,
        api_free_domain: str | None = None,
        free_key_suffix: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.auth_key = auth_key
        self.options = options or ProviderOptions()
        self.api_domain = api_domain or self.API_DOMAIN
        self.api_free_domain = api_free_domain or self.API_FREE_DOMAIN
        self.free_key_suffix = free_key_suffix or self.FREE_KEY_SUFFIX
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient | None = None) -> DeeplClient:
        return cls(
            auth_key=settings.deepl_auth_key,
            options=settings.provider_options(),
            api_domain=settings.deepl_api_domain,
            api_free_domain=settings.deepl_api_free_domain,
            free_key_suffix=settings.deepl_free_key_suffix,
            timeout=settings.deepl_timeout,
            client=client,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.auth_key)

    @property
    def is_free_key(self) -> bool:
        return self.auth_key.endswith(self.free_key_suffix)

    @property
    def url(self) -> str:
        """Translate endpoint, on the free host for free-tier keys."""
        domain = self.api_free_domain if self.is_free_key else self.api_domain
        return f"https://{domain}/v2/translate"

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"{self.AUTH_SCHEME} {self.auth_key}",
        }

    def build_payload(self, texts: list[str], target_lang: str, source_lang: str | None = None) -> dict[str, Any]:
        """Request body: the batch, both languages and the tuning options."""
        return {
            "text": list(texts),
            "source_lang": source_lang,
            "target_lang": target_lang,
            **self.options.payload(),
        }

    async def translate(
        self,
        texts: list[str],
        target_lang: str,
        source_lang: str | None = None,
    ) -> list[Translation]:
        """
        Translate a batch of strings.

        Args:
            texts: Strings to translate, in order
            target_lang: Target language code (e.g., 'de', 'en-gb')
            source_lang: Source language code; None lets DeepL detect it

        Returns:
            One Translation per input string, result[i] matching texts[i]

        Raises:
            ConfigurationError: No auth key configured
            ProviderError: The request failed or returned no translations
        """
        if not self.is_configured:
            raise ConfigurationError("Missing DeepL auth key.")

        if not texts:
            return []

        payload = self.build_payload(texts, target_lang, source_lang)
        logger.info(f"Translating {len(texts)} text(s) to {target_lang} via {self.url}")

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
            close_client = True

        try:
            response = await client.post(self.url, json=payload, headers=self.headers)
        except httpx.HTTPError as e:
            logger.error(f"DeepL request failed: {e}")
            raise ProviderError(f"DeepL request failed: {e}") from e
        finally:
            if close_client:
                await client.aclose()

        return self._parse_response(response, expected=len(texts))

    def _parse_response(self, response: httpx.Response, expected: int) -> list[Translation]:
        try:
            data = response.json()
        except ValueError:
            logger.error(f"DeepL returned a non-JSON response ({response.status_code})")
            raise ProviderError(self.FALLBACK_ERROR, status_code=response.status_code)

        if not isinstance(data, dict) or not isinstance(data.get("translations"), list):
            message = data.get("message") if isinstance(data, dict) else None
            logger.error(f"DeepL returned no translations ({response.status_code}): {message}")
            raise ProviderError(message or self.FALLBACK_ERROR, status_code=response.status_code)

        try:
            translations = [Translation.model_validate(item) for item in data["translations"]]
        except ValidationError as e:
            logger.error(f"DeepL returned malformed translations ({response.status_code}): {e}")
            raise ProviderError(self.FALLBACK_ERROR, status_code=response.status_code) from e

        if len(translations) != expected:
            raise ProviderError(
                f"DeepL returned {len(translations)} translations for {expected} texts",
                status_code=response.status_code,
            )

        return translations
