"""
Blueprint resource.

Blueprints describe the fields of a content node: their type, whether
they may be translated, their subfields (objects, structures) and the
fieldsets allowed inside blocks and layouts. Only the parts the
translator needs are read; the rest of a blueprint is ignored.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from machine_translation.resources.base import Resource

logger = logging.getLogger(__name__)


class FieldKind(str, Enum):
    """How a field is translated."""

    TEXT = "text"  # Plain or rich text, translated as one string
    OBJECT = "object"  # Mapping of declared subfields
    STRUCTURE = "structure"  # List of rows, each a mapping of subfields
    BLOCKS = "blocks"  # List of typed blocks
    LAYOUT = "layout"  # Rows of columns of blocks
    OTHER = "other"  # Anything else is passed through


# Field types translated as a single string
TEXT_FIELD_TYPES = frozenset({"text", "textarea", "writer", "markdown", "list"})


def resolve_kind(field_type: str | None) -> FieldKind:
    """Resolve a blueprint field type to the kind of translation it gets."""
    field_type = (field_type or "").lower()
    if field_type in TEXT_FIELD_TYPES:
        return FieldKind.TEXT
    try:
        return FieldKind(field_type)
    except ValueError:
        return FieldKind.OTHER


# =============================================================================
# Fields
# =============================================================================


@dataclass(frozen=True)
class BlueprintField:
    """Schema descriptor for a single field."""

    name: str
    type: str
    translatable: bool = True

    # For OBJECT/STRUCTURE: declared subfields, in blueprint order
    fields: tuple[BlueprintField, ...] = ()

    # For BLOCKS/LAYOUT: block type -> fieldset
    fieldsets: Fieldsets | None = None

    @property
    def kind(self) -> FieldKind:
        return resolve_kind(self.type)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type}

        if not self.translatable:
            result["translate"] = False
        if self.fields:
            result["fields"] = {f.name: f.to_dict() for f in self.fields}
        if self.fieldsets is not None:
            result["fieldsets"] = self.fieldsets.to_dict()

        return result

    @classmethod
    def from_dict(cls, name: str, data: Any) -> BlueprintField:
        """
        Create a field spec from its blueprint definition.

        A definition of `true` or one without a `type` takes the field
        name as its type, as the CMS does for shorthand definitions.
        """
        if not isinstance(data, dict):
            data = {}

        name = str(data.get("name") or name)
        field_type = str(data.get("type") or name)
        kind = resolve_kind(field_type)

        fieldsets = None
        if kind in (FieldKind.BLOCKS, FieldKind.LAYOUT):
            fieldsets = Fieldsets.from_blueprint(data.get("fieldsets"))

        return cls(
            name=name,
            type=field_type,
            translatable=data.get("translate", True) is not False,
            fields=parse_fields(data.get("fields")),
            fieldsets=fieldsets,
        )


def parse_fields(data: Any) -> tuple[BlueprintField, ...]:
    """Parse a blueprint `fields` mapping (or list of named definitions)."""
    if isinstance(data, dict):
        return tuple(BlueprintField.from_dict(str(name), definition) for name, definition in data.items())
    if isinstance(data, list):
        return tuple(
            BlueprintField.from_dict(str(definition.get("name", "")), definition)
            for definition in data
            if isinstance(definition, dict) and definition.get("name")
        )
    return ()


# =============================================================================
# Fieldsets
# =============================================================================


# Core block types available when a blocks/layout field declares no fieldsets
DEFAULT_FIELDSETS: dict[str, dict[str, Any]] = {
    "code": {
        "name": "Code",
        "fields": {
            "code": {"type": "textarea", "translate": False},
            "language": {"type": "select"},
        },
    },
    "gallery": {
        "name": "Gallery",
        "fields": {
            "images": {"type": "files"},
            "caption": {"type": "writer"},
            "ratio": {"type": "select"},
            "crop": {"type": "toggle"},
        },
    },
    "heading": {
        "name": "Heading",
        "fields": {
            "level": {"type": "toggles"},
            "text": {"type": "writer"},
        },
    },
    "image": {
        "name": "Image",
        "fields": {
            "location": {"type": "radio"},
            "image": {"type": "files"},
            "src": {"type": "url"},
            "alt": {"type": "text"},
            "caption": {"type": "writer"},
            "link": {"type": "url"},
            "ratio": {"type": "select"},
            "crop": {"type": "toggle"},
        },
    },
    "line": {"name": "Line", "fields": {}},
    "list": {"name": "List", "fields": {"text": {"type": "list"}}},
    "markdown": {"name": "Markdown", "fields": {"text": {"type": "markdown"}}},
    "quote": {
        "name": "Quote",
        "fields": {
            "text": {"type": "writer"},
            "citation": {"type": "writer"},
        },
    },
    "text": {"name": "Text", "fields": {"text": {"type": "writer"}}},
    "video": {
        "name": "Video",
        "fields": {
            "url": {"type": "url"},
            "caption": {"type": "writer"},
        },
    },
}


@dataclass(frozen=True)
class Fieldset:
    """The fields allowed inside a block of one type."""

    type: str
    name: str | None = None

    # Lowercased field key -> spec
    fields: dict[str, BlueprintField] = field(default_factory=dict)

    def field(self, key: str) -> BlueprintField | None:
        """Look up a field spec by key, ignoring case."""
        return self.fields.get(key.lower())

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.name:
            result["name"] = self.name
        result["fields"] = {f.name: f.to_dict() for f in self.fields.values()}
        return result

    @classmethod
    def from_dict(cls, fieldset_type: str, data: Any) -> Fieldset:
        data = dict(data) if isinstance(data, dict) else {}

        extends = data.pop("extends", None)
        if isinstance(extends, str):
            base = _default_definition(extends)
            if base is not None:
                data = {**base, **data}

        fieldset_type = str(data.get("type") or fieldset_type)

        # Fields are declared directly or spread across tabs
        specs = list(parse_fields(data.get("fields")))
        tabs = data.get("tabs")
        if isinstance(tabs, dict):
            for tab in tabs.values():
                if isinstance(tab, dict):
                    specs.extend(parse_fields(tab.get("fields")))

        return cls(
            type=fieldset_type,
            name=data.get("name"),
            fields={spec.name.lower(): spec for spec in specs},
        )


def _default_definition(reference: str) -> dict[str, Any] | None:
    """Resolve `blocks/<type>` (or a bare type) to a core fieldset definition."""
    fieldset_type = reference.rsplit("/", 1)[-1].lower()
    definition = DEFAULT_FIELDSETS.get(fieldset_type)
    if definition is None:
        logger.debug("Unknown fieldset reference: %s", reference)
        return None
    return copy.deepcopy(definition)


@dataclass(frozen=True)
class Fieldsets:
    """Block type -> fieldset, for one blocks or layout field."""

    fieldsets: dict[str, Fieldset] = field(default_factory=dict)

    def get(self, block_type: str | None) -> Fieldset | None:
        if not block_type:
            return None
        return self.fieldsets.get(block_type) or self.fieldsets.get(block_type.lower())

    def __contains__(self, block_type: str) -> bool:
        return self.get(block_type) is not None

    def __len__(self) -> int:
        return len(self.fieldsets)

    def to_dict(self) -> dict[str, Any]:
        return {name: fs.to_dict() for name, fs in self.fieldsets.items()}

    @classmethod
    def defaults(cls) -> Fieldsets:
        return cls({name: Fieldset.from_dict(name, d) for name, d in DEFAULT_FIELDSETS.items()})

    @classmethod
    def from_blueprint(cls, data: Any) -> Fieldsets:
        """
        Build fieldsets from a blueprint's `fieldsets` option.

        Accepts:
        - nothing: the core fieldsets
        - a list of core type names
        - a mapping of type -> definition, `true` or `blocks/<type>`
        - groups (`type: group`) holding any of the above
        """
        if data is None:
            return cls.defaults()
        return cls(_collect_fieldsets(data))


def _collect_fieldsets(data: Any) -> dict[str, Fieldset]:
    result: dict[str, Fieldset] = {}

    if isinstance(data, list):
        for item in data:
            if isinstance(item, str):
                definition = _default_definition(item)
                if definition is not None:
                    name = item.rsplit("/", 1)[-1]
                    result[name] = Fieldset.from_dict(name, definition)
            elif isinstance(item, dict):
                result.update(_collect_fieldsets(item))
        return result

    if not isinstance(data, dict):
        return result

    for name, definition in data.items():
        name = str(name)

        if isinstance(definition, dict) and definition.get("type") == "group":
            result.update(_collect_fieldsets(definition.get("fieldsets")))
        elif isinstance(definition, dict):
            result[name] = Fieldset.from_dict(name, definition)
        elif isinstance(definition, str):
            result[name] = Fieldset.from_dict(name, {"extends": definition})
        elif definition is True or definition is None:
            base = _default_definition(name)
            if base is not None:
                result[name] = Fieldset.from_dict(name, base)

    return result


# =============================================================================
# Blueprint
# =============================================================================


class Blueprint(Resource):
    """
    A content node's blueprint: its ordered field specs.

    Fields are collected from the blueprint's `fields`, and from any
    `tabs`, `columns` and `sections` that contain fields, in order.
    """

    def __init__(self, name: str, title: str | None = None, fields: tuple[BlueprintField, ...] = ()):
        self.name = name
        self.title = title or name
        self.fields = tuple(fields)

    @property
    def resource_id(self) -> str:
        return self.name

    def field(self, name: str) -> BlueprintField | None:
        """Get a field spec by name, ignoring case."""
        lowered = name.lower()
        for spec in self.fields:
            if spec.name.lower() == lowered:
                return spec
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "fields": {f.name: f.to_dict() for f in self.fields},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Blueprint:
        title = data.get("title")
        name = data.get("name") or (str(title).lower().replace(" ", "-") if title else "default")

        specs: dict[str, BlueprintField] = {}
        _collect_layout_fields(data, specs)

        return cls(name=str(name), title=title, fields=tuple(specs.values()))

    @classmethod
    def from_yaml(cls, path: Path | str) -> Blueprint:
        """Load a blueprint file, naming it after the file when unnamed."""
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        data.setdefault("name", path.stem)
        return cls.from_dict(data)


def _collect_layout_fields(data: Any, specs: dict[str, BlueprintField]) -> None:
    """Walk tabs/columns/sections and collect every field definition."""
    if not isinstance(data, dict):
        return

    for key in ("tabs", "columns", "sections"):
        container = data.get(key)
        if isinstance(container, dict):
            children = container.values()
        elif isinstance(container, list):
            children = container
        else:
            continue
        for child in children:
            _collect_layout_fields(child, specs)

    for spec in parse_fields(data.get("fields")):
        specs.setdefault(spec.name.lower(), spec)
