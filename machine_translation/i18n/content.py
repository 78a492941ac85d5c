"""
Content tree translation.

Walks a field's value according to its blueprint and translates every
text field inside it, keeping the shape of the tree intact:

- text fields are sent to the provider one at a time
- objects and structure rows keep only their declared subfields
- blocks keep type and visibility but always get a fresh id
- layouts keep ids, column widths and attrs verbatim

Fields that can't or shouldn't be translated (empty, `translate: false`,
unknown types, undecodable values) come back unchanged. Provider errors
are never caught here; a failure anywhere aborts the whole call.
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Awaitable, Callable

import yaml
from pydantic import ValidationError

from machine_translation.core.errors import NestingDepthError
from machine_translation.core.models import (
    Block,
    ContentField,
    ContentNode,
    Layout,
    find_key,
)
from machine_translation.core.utils import is_empty
from machine_translation.i18n.translator import Translator
from machine_translation.resources.blueprint import (
    Blueprint,
    BlueprintField,
    FieldKind,
    Fieldsets,
)

logger = logging.getLogger(__name__)

FieldHandler = Callable[[ContentField, str, BlueprintField, int], Awaitable[ContentField]]


# =============================================================================
# Value encodings
# =============================================================================


def _decode_json(value: Any) -> tuple[Any, bool]:
    """Decode a blocks/layout value. Returns (data, was_string)."""
    if isinstance(value, str):
        try:
            return json.loads(value), True
        except ValueError:
            return None, True
    return value, False


def _decode_yaml(value: Any) -> tuple[Any, bool]:
    """Decode an object/structure value. Returns (data, was_string)."""
    if isinstance(value, str):
        try:
            return yaml.safe_load(value), True
        except yaml.YAMLError:
            return None, True
    return value, False


def _encode_json(data: Any, as_string: bool) -> Any:
    return json.dumps(data, ensure_ascii=False) if as_string else data


def _encode_yaml(data: Any, as_string: bool) -> Any:
    if not as_string:
        return data
    return yaml.safe_dump(data, allow_unicode=True, sort_keys=False, default_flow_style=False)


# =============================================================================
# Content Translator
# =============================================================================


class ContentTranslator:
    """
    Recursive field translator.

    Usage:
        engine = ContentTranslator(translator)

        node = ContentNode(language="en", content={"title": "Hello"})
        field = await engine.translate_field(
            node.field("title"), "de", BlueprintField.from_dict("title", {"type": "text"})
        )
        field.value  # -> "Hallo"

        # Whole content node against its blueprint
        translated = await engine.translate_node(node, "de", blueprint)
    """

    # Every FieldKind has exactly one handler; OTHER is the pass-through arm
    HANDLERS: dict[FieldKind, str] = {
        FieldKind.TEXT: "_translate_text_field",
        FieldKind.OBJECT: "_translate_object_field",
        FieldKind.STRUCTURE: "_translate_structure_field",
        FieldKind.BLOCKS: "_translate_blocks_field",
        FieldKind.LAYOUT: "_translate_layout_field",
        FieldKind.OTHER: "_pass_through",
    }

    def __init__(self, translator: Translator, max_depth: int = 32):
        self.translator = translator
        self.max_depth = max_depth

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def translate_field(
        self,
        field: ContentField,
        target_lang: str,
        blueprint_field: BlueprintField | None,
        depth: int = 0,
    ) -> ContentField:
        """
        Translate a field according to its blueprint spec.

        Args:
            field: The field to translate
            target_lang: Target language code
            blueprint_field: The field's spec; None passes the field through
            depth: Current nesting depth (0 for top-level fields)

        Returns:
            A new field holding the translated value, or the input field
            itself when nothing applies
        """
        if is_empty(field.value):
            return field

        if blueprint_field is None:
            logger.debug(f"No blueprint for field '{field.name}', passing through")
            return field

        if not blueprint_field.translatable:
            logger.debug(f"Field '{field.name}' is not translatable, passing through")
            return field

        if depth > self.max_depth:
            raise NestingDepthError(self.max_depth)

        handler: FieldHandler = getattr(self, self.HANDLERS[blueprint_field.kind])
        return await handler(field, target_lang, blueprint_field, depth)

    async def _pass_through(
        self, field: ContentField, target_lang: str, blueprint_field: BlueprintField, depth: int
    ) -> ContentField:
        logger.debug(f"Field '{field.name}' has type '{blueprint_field.type}', passing through")
        return field

    # =========================================================================
    # Text
    # =========================================================================

    async def _translate_text_field(
        self, field: ContentField, target_lang: str, blueprint_field: BlueprintField, depth: int
    ) -> ContentField:
        value = field.value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            logger.warning(f"Text field '{field.name}' holds a {type(value).__name__}, passing through")
            return field

        source_lang = field.parent.language if field.parent else None
        translated = await self.translator.translate_text(value, target_lang, source_lang)
        return field.with_value(translated)

    # =========================================================================
    # Object & Structure
    # =========================================================================

    async def _translate_object_field(
        self, field: ContentField, target_lang: str, blueprint_field: BlueprintField, depth: int
    ) -> ContentField:
        data, as_string = _decode_yaml(field.value)
        if not isinstance(data, dict):
            logger.warning(f"Object field '{field.name}' is not a mapping, passing through")
            return field

        result = await self._translate_entry(data, field.parent, target_lang, blueprint_field, depth)
        return field.with_value(_encode_yaml(result, as_string))

    async def _translate_structure_field(
        self, field: ContentField, target_lang: str, blueprint_field: BlueprintField, depth: int
    ) -> ContentField:
        data, as_string = _decode_yaml(field.value)
        if not isinstance(data, list):
            logger.warning(f"Structure field '{field.name}' is not a list, passing through")
            return field

        rows = []
        for row in data:
            if isinstance(row, dict):
                row = await self._translate_entry(row, field.parent, target_lang, blueprint_field, depth)
            rows.append(row)

        return field.with_value(_encode_yaml(rows, as_string))

    async def _translate_entry(
        self,
        entry: dict[str, Any],
        parent: ContentNode | None,
        target_lang: str,
        blueprint_field: BlueprintField,
        depth: int,
    ) -> dict[str, Any]:
        """Translate the declared subfields of one object or structure row."""
        result: dict[str, Any] = {}

        for spec in blueprint_field.fields:
            key = find_key(entry, spec.name)
            subfield = ContentField(
                name=spec.name,
                value=entry[key] if key is not None else None,
                parent=parent,
            )
            translated = await self.translate_field(subfield, target_lang, spec, depth + 1)
            result[spec.name] = translated.value

        return result

    # =========================================================================
    # Blocks
    # =========================================================================

    async def _translate_blocks_field(
        self, field: ContentField, target_lang: str, blueprint_field: BlueprintField, depth: int
    ) -> ContentField:
        if field.parent is None:
            logger.debug(f"Blocks field '{field.name}' has no parent, passing through")
            return field

        blocks = self._parse_blocks(field)
        if blocks is None:
            return field

        translated = await self.translate_blocks(blocks, target_lang, blueprint_field, field.parent, depth)
        _, as_string = _decode_json(field.value)
        return field.with_value(_encode_json([b.to_dict() for b in translated], as_string))

    def _parse_blocks(self, field: ContentField) -> list[Block] | None:
        data, _ = _decode_json(field.value)
        if not isinstance(data, list):
            logger.warning(f"Blocks field '{field.name}' could not be decoded, passing through")
            return None

        try:
            return [Block.from_dict(item) for item in data]
        except ValidationError as e:
            logger.warning(f"Blocks field '{field.name}' holds invalid blocks, passing through: {e}")
            return None

    async def translate_blocks(
        self,
        blocks: list[Block],
        target_lang: str,
        blueprint_field: BlueprintField | None,
        parent: ContentNode | None,
        depth: int = 0,
    ) -> list[Block]:
        """
        Translate a list of blocks.

        Each block's fields are matched (case-insensitively) against the
        fieldset for its type; blocks of unknown types keep their content.
        Every returned block is rebuilt without its old id, so it gets a
        fresh one.

        Args:
            blocks: Blocks to translate, in order
            target_lang: Target language code
            blueprint_field: The blocks/layout field spec holding fieldsets;
                None uses the core fieldsets
            parent: Node owning the blocks; None returns the blocks unchanged
            depth: Nesting depth of the field holding the blocks

        Returns:
            Translated blocks, in the original order
        """
        if parent is None:
            logger.debug("Blocks have no parent, passing through")
            return list(blocks)

        fieldsets = None
        if blueprint_field is not None:
            fieldsets = blueprint_field.fieldsets
        if fieldsets is None:
            fieldsets = Fieldsets.defaults()

        result = []
        for block in blocks:
            fieldset = fieldsets.get(block.type)
            if fieldset is None:
                logger.debug(f"No fieldset for block type '{block.type}'")

            content: dict[str, Any] = {}
            for key, value in block.content.items():
                spec = fieldset.field(key) if fieldset is not None else None
                subfield = ContentField(name=key, value=value, parent=parent)
                translated = await self.translate_field(subfield, target_lang, spec, depth + 1)
                content[key] = translated.value

            data = block.to_dict()
            data.pop("id", None)
            data["content"] = content
            result.append(Block.from_dict(data))

        return result

    # =========================================================================
    # Layout
    # =========================================================================

    async def _translate_layout_field(
        self, field: ContentField, target_lang: str, blueprint_field: BlueprintField, depth: int
    ) -> ContentField:
        if field.parent is None:
            logger.debug(f"Layout field '{field.name}' has no parent, passing through")
            return field

        data, as_string = _decode_json(field.value)
        if not isinstance(data, list):
            logger.warning(f"Layout field '{field.name}' could not be decoded, passing through")
            return field

        try:
            layouts = [Layout.from_dict(item) for item in data]
        except ValidationError as e:
            logger.warning(f"Layout field '{field.name}' holds invalid rows, passing through: {e}")
            return field

        translated = []
        for layout in layouts:
            translated.append(
                await self.translate_layout(layout, target_lang, blueprint_field, field.parent, depth)
            )

        return field.with_value(_encode_json([layout.to_dict() for layout in translated], as_string))

    async def translate_layout(
        self,
        layout: Layout,
        target_lang: str,
        blueprint_field: BlueprintField | None,
        parent: ContentNode | None,
        depth: int = 0,
    ) -> Layout:
        """Translate the blocks of every column; ids, widths and attrs are kept."""
        columns = []
        for column in layout.columns:
            blocks = await self.translate_blocks(column.blocks, target_lang, blueprint_field, parent, depth + 1)
            columns.append(column.model_copy(update={"blocks": blocks}))

        return layout.model_copy(update={"columns": columns, "attrs": copy.deepcopy(layout.attrs)})

    # =========================================================================
    # Content nodes
    # =========================================================================

    async def translate_node(self, node: ContentNode, target_lang: str, blueprint: Blueprint) -> ContentNode:
        """
        Translate every blueprint field of a content node.

        Returns a new node in the target language. Content keys the
        blueprint doesn't declare are copied unchanged.
        """
        content = copy.deepcopy(node.content)

        for spec in blueprint.fields:
            key = find_key(node.content, spec.name)
            if key is None:
                continue
            translated = await self.translate_field(node.field(key), target_lang, spec)
            content[key] = copy.deepcopy(translated.value)

        return ContentNode(id=node.id, language=target_lang, content=content)


def _check_handlers() -> None:
    missing = set(FieldKind) - set(ContentTranslator.HANDLERS)
    if missing:
        raise TypeError(f"No handler for field kinds: {sorted(k.value for k in missing)}")


_check_handlers()
