"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import BaseModel
from pydantic_settings import BaseSettings


class ProviderOptions(BaseModel):
    """
    DeepL tuning options, sent with every request.

    Values are passed through verbatim; options left unset are not sent.
    The full set is part of the translation cache key.
    """

    split_sentences: str | None = None
    preserve_formatting: bool | None = None
    formality: str | None = None
    glossary_id: str | None = None
    tag_handling: str | None = None
    outline_detection: bool | None = None
    non_splitting_tags: list[str] | None = None
    splitting_tags: list[str] | None = None
    ignore_tags: list[str] | None = None

    def payload(self) -> dict[str, Any]:
        """Options to merge into the request body."""
        return self.model_dump(exclude_none=True)


def _split_tags(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [tag.strip() for tag in value.split(",") if tag.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    log_level: str = "INFO"

    # ==========================================================================
    # DeepL
    # ==========================================================================

    deepl_auth_key: str = ""
    deepl_api_domain: str = "api.deepl.com"
    deepl_api_free_domain: str = "api-free.deepl.com"
    deepl_free_key_suffix: str = ":fx"  # Free-tier keys end with this
    deepl_timeout: float = 30.0

    # Tuning options (see https://developers.deepl.com/docs/api-reference/translate)
    deepl_split_sentences: str | None = None
    deepl_preserve_formatting: bool | None = None
    deepl_formality: str | None = None
    deepl_glossary_id: str | None = None
    deepl_tag_handling: str | None = None
    deepl_outline_detection: bool | None = None

    # Comma-separated tag names
    deepl_non_splitting_tags: str | None = None
    deepl_splitting_tags: str | None = None
    deepl_ignore_tags: str | None = None

    # ==========================================================================
    # Cache
    # ==========================================================================

    cache_enabled: bool = True
    cache_ttl: int | None = None  # Seconds; None keeps entries forever
    cache_dir: str = ""  # Filesystem cache when set, in-memory otherwise

    # ==========================================================================
    # Translation engine
    # ==========================================================================

    max_depth: int = 32  # Deepest allowed object/structure/blocks/layout nesting

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "http://localhost:3000"

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def provider_options(self) -> ProviderOptions:
        """The tuning options sent to DeepL."""
        return ProviderOptions(
            split_sentences=self.deepl_split_sentences,
            preserve_formatting=self.deepl_preserve_formatting,
            formality=self.deepl_formality,
            glossary_id=self.deepl_glossary_id,
            tag_handling=self.deepl_tag_handling,
            outline_detection=self.deepl_outline_detection,
            non_splitting_tags=_split_tags(self.deepl_non_splitting_tags),
            splitting_tags=_split_tags(self.deepl_splitting_tags),
            ignore_tags=_split_tags(self.deepl_ignore_tags),
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
