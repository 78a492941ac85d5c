"""
Tests for content models.
"""

import pytest
from pydantic import ValidationError

from machine_translation.core.errors import NestingDepthError, ProviderError
from machine_translation.core.models import Block, ContentNode, Layout
from machine_translation.core.utils import is_empty


class TestBlock:
    def test_stored_form_round_trip(self):
        data = {"content": {"text": "Hi"}, "id": "abc", "isHidden": True, "type": "text"}
        block = Block.from_dict(data)

        assert block.is_hidden
        assert block.to_dict() == data

    def test_missing_id_is_generated(self):
        first = Block.from_dict({"type": "text", "id": ""})
        second = Block.from_dict({"type": "text"})

        assert first.id
        assert second.id
        assert first.id != second.id

    def test_non_mapping_content_becomes_empty(self):
        assert Block.from_dict({"type": "line", "content": []}).content == {}

    def test_extra_keys_survive(self):
        block = Block.from_dict({"type": "text", "custom": 1})
        assert block.to_dict()["custom"] == 1

    def test_non_mapping_fails_validation(self):
        with pytest.raises(ValidationError):
            Block.from_dict("garbage")


class TestLayout:
    def test_round_trip(self):
        data = {
            "attrs": {"class": "wide"},
            "columns": [
                {
                    "blocks": [{"content": {}, "id": "b", "isHidden": False, "type": "line"}],
                    "id": "c",
                    "width": "1/3",
                }
            ],
            "id": "l",
        }
        assert Layout.from_dict(data).to_dict() == data

    def test_defaults(self):
        layout = Layout.from_dict({"columns": [{}]})
        assert layout.attrs == {}
        assert layout.columns[0].width == "1/1"
        assert layout.columns[0].blocks == []


class TestContentNode:
    def test_field_lookup_ignores_case(self):
        node = ContentNode(language="en", content={"Title": "Hello"})
        field = node.field("title")

        assert field.value == "Hello"
        assert field.parent is node

    def test_missing_field_is_none(self):
        assert ContentNode().field("nope").value is None


class TestHelpers:
    def test_is_empty(self):
        assert is_empty(None)
        assert is_empty(" \n")
        assert is_empty([])
        assert not is_empty("0")
        assert not is_empty(0)
        assert not is_empty(False)

    def test_error_messages(self):
        assert ProviderError("Quota exceeded", status_code=456).status_code == 456
        assert "8" in str(NestingDepthError(8))
