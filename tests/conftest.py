"""
Shared fixtures for machine translation tests.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from machine_translation.core.models import ContentNode, Translation
from machine_translation.i18n import ContentTranslator


class FakeTranslator:
    """
    Stands in for Translator. Records every call and answers with
    "<target>:<text>" unless a fixed translation is given.
    """

    def __init__(self, translations: dict[str, str] | None = None, error: Exception | None = None):
        self.translations = translations or {}
        self.error = error
        self.calls: list[tuple[list[str], str, str | None]] = []

    async def translate(self, texts: list[str], target_lang: str, source_lang: str | None = None) -> list[Translation]:
        self.calls.append((list(texts), target_lang, source_lang))
        if self.error is not None:
            raise self.error
        return [
            Translation(
                detected_source_language=(source_lang or "en").upper(),
                text=self.translations.get(text, f"{target_lang}:{text}"),
            )
            for text in texts
        ]

    async def translate_text(self, text: str, target_lang: str, source_lang: str | None = None) -> str:
        translations = await self.translate([text], target_lang, source_lang)
        return translations[0].text

    @property
    def texts(self) -> list[str]:
        """Every string sent, in call order."""
        return [text for texts, _, _ in self.calls for text in texts]


class DeeplStub:
    """
    Fake DeepL endpoint for httpx.MockTransport.

    Echoes "<target>:<text>" per input unless a response is fixed.
    """

    def __init__(self, response: dict[str, Any] | None = None, status_code: int = 200):
        self.response = response
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.response is not None:
            return httpx.Response(self.status_code, json=self.response)

        body = json.loads(request.content)
        translations = [
            {"detected_source_language": "EN", "text": f"{body['target_lang']}:{text}"}
            for text in body["text"]
        ]
        return httpx.Response(self.status_code, json={"translations": translations})

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def fake_translator():
    """Recording translator."""
    return FakeTranslator()


@pytest.fixture
def engine(fake_translator):
    """Content translator over the recording translator."""
    return ContentTranslator(fake_translator, max_depth=8)


@pytest.fixture
def node():
    """English content node."""
    return ContentNode(id="home", language="en")


@pytest.fixture
def deepl_stub() -> Callable[..., DeeplStub]:
    """Factory for fake DeepL endpoints."""
    return DeeplStub
