"""
Machine translation - command line entry point.

Usage:
    # Translate a content file (YAML or JSON) against its blueprint
    machine-translation translate content/home.yml --blueprint blueprints/home.yml --target de

    # Translate loose strings
    machine-translation text "Hello" "Goodbye" --target fr

    # Run the HTTP API
    machine-translation serve
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml
from dotenv import load_dotenv

from machine_translation.config import Settings, get_settings
from machine_translation.core.errors import TranslationError
from machine_translation.core.models import ContentNode
from machine_translation.i18n import ContentTranslator, Translator
from machine_translation.resources.blueprint import Blueprint

logger = logging.getLogger("machine_translation")


def load_content(path: Path) -> dict[str, Any]:
    """Load a content mapping from a YAML or JSON file."""
    text = path.read_text(encoding="utf-8")
    data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError(f"Content file must hold a mapping: {path}")
    return data


async def translate_content_file(
    content_path: Path,
    blueprint_path: Path,
    target_lang: str,
    source_lang: str | None,
    settings: Settings,
) -> ContentNode:
    """Translate one content file and return the translated node."""
    blueprint = Blueprint.from_yaml(blueprint_path)
    node = ContentNode(language=source_lang, content=load_content(content_path))

    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.deepl_timeout)) as http_client:
        translator = Translator.from_settings(settings, http_client=http_client)
        engine = ContentTranslator(translator, max_depth=settings.max_depth)

        logger.info(f"Translating {content_path} ({len(blueprint.fields)} fields) to {target_lang}")
        return await engine.translate_node(node, target_lang, blueprint)


async def translate_strings(texts: list[str], target_lang: str, source_lang: str | None, settings: Settings) -> list[str]:
    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.deepl_timeout)) as http_client:
        translator = Translator.from_settings(settings, http_client=http_client)
        translations = await translator.translate(texts, target_lang, source_lang)
    return [t.text for t in translations]


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="machine-translation",
        description="Translate structured CMS content through DeepL",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    translate = subparsers.add_parser("translate", help="Translate a content file")
    translate.add_argument("content", type=Path, help="Content file (YAML or JSON)")
    translate.add_argument("--blueprint", "-b", type=Path, required=True, help="Blueprint YAML file")
    translate.add_argument("--target", "-t", required=True, help="Target language code")
    translate.add_argument("--source", "-s", default=None, help="Source language code (auto-detect if omitted)")
    translate.add_argument("--output", "-o", type=Path, default=None, help="Write YAML here instead of stdout")

    text = subparsers.add_parser("text", help="Translate strings")
    text.add_argument("texts", nargs="+", help="Strings to translate")
    text.add_argument("--target", "-t", required=True, help="Target language code")
    text.add_argument("--source", "-s", default=None, help="Source language code")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address")
    serve.add_argument("--port", type=int, default=None, help="Port")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    load_dotenv()
    args = _parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "machine_translation.api.app:app",
            host=args.host or settings.api_host,
            port=args.port or settings.api_port,
        )
        return 0

    try:
        if args.command == "translate":
            node = asyncio.run(
                translate_content_file(args.content, args.blueprint, args.target, args.source, settings)
            )
            output = yaml.safe_dump(node.content, allow_unicode=True, sort_keys=False)
            if args.output:
                args.output.write_text(output, encoding="utf-8")
                logger.info(f"Wrote {args.output}")
            else:
                sys.stdout.write(output)
        else:
            for translated in asyncio.run(translate_strings(args.texts, args.target, args.source, settings)):
                print(translated)
    except TranslationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
