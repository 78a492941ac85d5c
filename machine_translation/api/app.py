"""
FastAPI application for machine translation.

HTTP surface for the CMS panel and other services: translate plain
strings, single fields or whole content nodes.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from machine_translation.config import get_settings
from machine_translation.core.errors import (
    ConfigurationError,
    NestingDepthError,
    ProviderError,
    TranslationError,
)
from machine_translation.core.models import ContentField, ContentNode
from machine_translation.i18n import ContentTranslator, Translator
from machine_translation.resources.blueprint import Blueprint, BlueprintField

logger = logging.getLogger(__name__)


# =============================================================================
# App State
# =============================================================================


class AppState:
    """Application state - initialized at startup or on first use."""

    http_client: httpx.AsyncClient | None = None
    translator: Translator | None = None


state = AppState()


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup app resources."""
    settings = get_settings()

    state.http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.deepl_timeout))
    state.translator = Translator.from_settings(settings, http_client=state.http_client)

    logger.info(f"Machine translation API starting in {settings.environment} mode")

    yield

    await state.http_client.aclose()
    state.http_client = None
    state.translator = None
    logger.info("Machine translation API shutting down")


# =============================================================================
# App Setup
# =============================================================================


app = FastAPI(
    title="Machine Translation API",
    description="Translate structured CMS content through DeepL",
    version="0.1.0",
    lifespan=lifespan,
)


# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error Handlers
# =============================================================================


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Translation misconfigured: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError):
    return JSONResponse(status_code=502, content={"detail": exc.message})


@app.exception_handler(NestingDepthError)
async def nesting_depth_error_handler(request: Request, exc: NestingDepthError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(TranslationError)
async def translation_error_handler(request: Request, exc: TranslationError):
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# =============================================================================
# Dependencies
# =============================================================================


def get_translator() -> Translator:
    if state.translator is None:
        state.translator = Translator.from_settings(get_settings())
    return state.translator


def get_content_translator(translator: Translator = Depends(get_translator)) -> ContentTranslator:
    return ContentTranslator(translator, max_depth=get_settings().max_depth)


# =============================================================================
# Request/Response Models
# =============================================================================


class TranslateTextsRequest(BaseModel):
    texts: list[str]
    target_lang: str
    source_lang: str | None = None


class TranslationResponse(BaseModel):
    detected_source_language: str | None = None
    text: str


class TranslateTextsResponse(BaseModel):
    translations: list[TranslationResponse]


class TranslateFieldRequest(BaseModel):
    name: str = "field"
    value: Any = None
    blueprint: dict[str, Any] = Field(default_factory=dict)  # The field's blueprint definition
    target_lang: str
    source_lang: str | None = None


class TranslateFieldResponse(BaseModel):
    name: str
    value: Any = None


class TranslatePageRequest(BaseModel):
    content: dict[str, Any]
    blueprint: dict[str, Any]  # The page blueprint
    target_lang: str
    source_lang: str | None = None


class TranslatePageResponse(BaseModel):
    language: str | None
    content: dict[str, Any]


# =============================================================================
# Health Check
# =============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "machine-translation"}


# =============================================================================
# Translation
# =============================================================================


@app.post("/translate", response_model=TranslateTextsResponse)
async def translate_texts(
    request: TranslateTextsRequest,
    translator: Translator = Depends(get_translator),
):
    """Translate a batch of strings; results keep the input order."""
    translations = await translator.translate(request.texts, request.target_lang, request.source_lang)
    return TranslateTextsResponse(
        translations=[TranslationResponse(**t.model_dump()) for t in translations]
    )


@app.post("/translate/field", response_model=TranslateFieldResponse)
async def translate_field(
    request: TranslateFieldRequest,
    engine: ContentTranslator = Depends(get_content_translator),
):
    """Translate one field value against its blueprint definition."""
    node = ContentNode(language=request.source_lang, content={request.name: request.value})
    spec = BlueprintField.from_dict(request.name, request.blueprint)

    field = await engine.translate_field(
        ContentField(name=request.name, value=request.value, parent=node),
        request.target_lang,
        spec,
    )
    return TranslateFieldResponse(name=field.name, value=field.value)


@app.post("/translate/page", response_model=TranslatePageResponse)
async def translate_page(
    request: TranslatePageRequest,
    engine: ContentTranslator = Depends(get_content_translator),
):
    """Translate every field of a content node against its blueprint."""
    node = ContentNode(language=request.source_lang, content=request.content)
    blueprint = Blueprint.from_dict(request.blueprint)

    translated = await engine.translate_node(node, request.target_lang, blueprint)
    return TranslatePageResponse(language=translated.language, content=translated.content)
