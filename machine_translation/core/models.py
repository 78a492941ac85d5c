"""
Core content models for machine translation.

These models mirror the host CMS content shapes the translator walks:
content nodes owning named fields, blocks, layouts and the translations
returned by the provider. Block and layout models serialize to the same
JSON the CMS stores, so translated values can be written back verbatim.
"""

from __future__ import annotations

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from machine_translation.core.utils import generate_id


def find_key(mapping: dict[str, Any], name: str) -> str | None:
    """Find the key in a mapping matching name case-insensitively."""
    if name in mapping:
        return name
    lowered = name.lower()
    for key in mapping:
        if isinstance(key, str) and key.lower() == lowered:
            return key
    return None


# =============================================================================
# Content Node / Field
# =============================================================================


class ContentNode(BaseModel):
    """
    A host content node (a page, a file, the site) owning named fields.

    The node's language is the source language of its content. It may be
    None, in which case the provider detects the source language.
    """

    id: str = Field(default_factory=generate_id)
    language: str | None = None
    content: dict[str, Any] = Field(default_factory=dict)

    def field(self, name: str) -> ContentField:
        """Get a field by name. Missing fields have a None value."""
        key = find_key(self.content, name)
        value = self.content[key] if key is not None else None
        return ContentField(name=name, value=value, parent=self)


class ContentField(BaseModel):
    """
    A named value read from a content node.

    The value is untyped: a string, a list or a nested mapping depending
    on the blueprint field type. Fields created inside objects, structures
    and blocks keep a reference to the node that owns the top-level field.
    """

    name: str
    value: Any = None
    parent: ContentNode | None = None

    def with_value(self, value: Any) -> ContentField:
        """Return a copy of this field holding a new value."""
        return ContentField(name=self.name, value=value, parent=self.parent)


# =============================================================================
# Blocks & Layouts
# =============================================================================


class Block(BaseModel):
    """
    A typed content unit inside a blocks or layout field.

    Serializes to {"content": ..., "id": ..., "isHidden": ..., "type": ...}.
    A block built without an id gets a fresh one.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    content: dict[str, Any] = Field(default_factory=dict)
    id: str = Field(default_factory=generate_id)
    is_hidden: bool = Field(default=False, alias="isHidden")
    type: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Block:
        """Create a block from its stored form. Non-mappings fail validation."""
        if not isinstance(data, dict):
            return cls.model_validate(data)
        data = dict(data)
        if not data.get("id"):
            data.pop("id", None)
        if not isinstance(data.get("content"), dict):
            data["content"] = {}
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class LayoutColumn(BaseModel):
    """A column of blocks inside a layout row. Width is kept verbatim."""

    model_config = ConfigDict(extra="allow")

    blocks: list[Block] = Field(default_factory=list)
    id: str = Field(default_factory=generate_id)
    width: str = "1/1"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LayoutColumn:
        if not isinstance(data, dict):
            return cls.model_validate(data)
        data = dict(data)
        data["blocks"] = [Block.from_dict(b) for b in data.get("blocks") or []]
        if not data.get("id"):
            data.pop("id", None)
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        result = self.model_dump(by_alias=True, exclude={"blocks"})
        result["blocks"] = [b.to_dict() for b in self.blocks]
        return result


class Layout(BaseModel):
    """
    A layout row: ordered columns plus opaque attributes.

    Attributes (icons, backgrounds, custom settings) are never translated
    and are copied verbatim. The CMS stores empty attrs as an empty list,
    so any JSON value is accepted.
    """

    model_config = ConfigDict(extra="allow")

    attrs: Any = Field(default_factory=dict)
    columns: list[LayoutColumn] = Field(default_factory=list)
    id: str = Field(default_factory=generate_id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Layout:
        if not isinstance(data, dict):
            return cls.model_validate(data)
        data = dict(data)
        data["attrs"] = copy.deepcopy(data.get("attrs", {}))
        data["columns"] = [LayoutColumn.from_dict(c) for c in data.get("columns") or []]
        if not data.get("id"):
            data.pop("id", None)
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        result = self.model_dump(by_alias=True, exclude={"columns", "attrs"})
        result["attrs"] = copy.deepcopy(self.attrs)
        result["columns"] = [c.to_dict() for c in self.columns]
        return result


# =============================================================================
# Provider Results
# =============================================================================


class Translation(BaseModel):
    """One translated string, positionally matching its source text."""

    detected_source_language: str | None = None
    text: str
