"""
Tests for the recursive content translator.

These use a recording translator in place of DeepL, so every assertion
about what got translated is an assertion about what was sent.
"""

import json

import pytest
import yaml

from machine_translation.core.errors import NestingDepthError, ProviderError
from machine_translation.core.models import Block, ContentField, ContentNode, Layout, LayoutColumn
from machine_translation.i18n import ContentTranslator
from machine_translation.resources.blueprint import Blueprint, BlueprintField, FieldKind


def spec(name, definition):
    return BlueprintField.from_dict(name, definition)


TEXT = {"type": "text"}


# =============================================================================
# Dispatch
# =============================================================================


class TestDispatch:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    async def test_empty_values_are_untouched(self, engine, fake_translator, node, value):
        field = ContentField(name="title", value=value, parent=node)
        result = await engine.translate_field(field, "de", spec("title", TEXT))

        assert result is field
        assert fake_translator.calls == []

    @pytest.mark.asyncio
    async def test_not_translatable_returns_same_field(self, engine, fake_translator, node):
        field = ContentField(name="sku", value="AB-12", parent=node)
        result = await engine.translate_field(field, "de", spec("sku", {"type": "text", "translate": False}))

        assert result is field
        assert fake_translator.calls == []

    @pytest.mark.asyncio
    async def test_missing_spec_passes_through(self, engine, fake_translator, node):
        field = ContentField(name="title", value="Hello", parent=node)
        assert await engine.translate_field(field, "de", None) is field
        assert fake_translator.calls == []

    @pytest.mark.asyncio
    async def test_unknown_type_passes_through(self, engine, fake_translator, node):
        field = ContentField(name="published", value="2024-01-01", parent=node)
        result = await engine.translate_field(field, "de", spec("published", {"type": "date"}))

        assert result.value == "2024-01-01"
        assert fake_translator.calls == []

    def test_every_kind_has_a_handler(self):
        assert set(ContentTranslator.HANDLERS) == set(FieldKind)


# =============================================================================
# Scalars
# =============================================================================


class TestScalar:
    @pytest.mark.asyncio
    async def test_hello_to_german(self, engine, fake_translator, node):
        fake_translator.translations["Hello"] = "Hallo"
        field = node.field("title").with_value("Hello")

        result = await engine.translate_field(field, "de", spec("title", TEXT))

        assert result.value == "Hallo"
        assert result.name == "title"
        assert result.parent is node
        assert fake_translator.calls == [(["Hello"], "de", "en")]

    @pytest.mark.asyncio
    async def test_source_language_from_parent(self, engine, fake_translator):
        parent = ContentNode(language="fr")
        field = ContentField(name="text", value="Bonjour", parent=parent)

        await engine.translate_field(field, "de", spec("text", {"type": "textarea"}))

        assert fake_translator.calls[0][2] == "fr"

    @pytest.mark.asyncio
    async def test_no_parent_lets_provider_detect(self, engine, fake_translator):
        field = ContentField(name="text", value="Hello", parent=None)

        result = await engine.translate_field(field, "de", spec("text", {"type": "writer"}))

        assert result.value == "de:Hello"
        assert fake_translator.calls[0][2] is None

    @pytest.mark.asyncio
    async def test_numbers_are_sent_as_text(self, engine, fake_translator, node):
        field = ContentField(name="text", value=42, parent=node)
        result = await engine.translate_field(field, "de", spec("text", TEXT))

        assert result.value == "de:42"

    @pytest.mark.asyncio
    async def test_rich_text_is_one_string(self, engine, fake_translator, node):
        html = "<p>Hello <strong>world</strong></p>"
        field = ContentField(name="text", value=html, parent=node)

        await engine.translate_field(field, "de", spec("text", {"type": "writer"}))

        assert fake_translator.texts == [html]


# =============================================================================
# Object & Structure
# =============================================================================


SEO = {
    "type": "object",
    "fields": {
        "title": {"type": "text"},
        "description": {"type": "textarea"},
        "noindex": {"type": "toggle"},
    },
}


class TestObject:
    @pytest.mark.asyncio
    async def test_translates_declared_fields_only(self, engine, fake_translator, node):
        value = {"title": "Welcome", "description": "About us", "noindex": "false", "legacy": "drop me"}
        field = ContentField(name="seo", value=value, parent=node)

        result = await engine.translate_field(field, "de", spec("seo", SEO))

        assert result.value == {
            "title": "de:Welcome",
            "description": "de:About us",
            "noindex": "false",
        }
        assert fake_translator.texts == ["Welcome", "About us"]

    @pytest.mark.asyncio
    async def test_keys_match_ignoring_case(self, engine, node):
        field = ContentField(name="seo", value={"Title": "Welcome"}, parent=node)
        result = await engine.translate_field(field, "de", spec("seo", SEO))

        assert result.value["title"] == "de:Welcome"
        assert result.value["description"] is None

    @pytest.mark.asyncio
    async def test_yaml_string_stays_a_string(self, engine, node):
        field = ContentField(name="seo", value="title: Welcome\n", parent=node)
        result = await engine.translate_field(field, "de", spec("seo", SEO))

        assert isinstance(result.value, str)
        assert yaml.safe_load(result.value)["title"] == "de:Welcome"

    @pytest.mark.asyncio
    async def test_nested_objects(self, engine, node):
        definition = {
            "type": "object",
            "fields": {"author": {"type": "object", "fields": {"bio": {"type": "text"}}}},
        }
        field = ContentField(name="meta", value={"author": {"bio": "Writer"}}, parent=node)

        result = await engine.translate_field(field, "de", spec("meta", definition))

        assert result.value == {"author": {"bio": "de:Writer"}}


FAQ = {
    "type": "structure",
    "fields": {"question": {"type": "text"}, "answer": {"type": "writer"}},
}


class TestStructure:
    @pytest.mark.asyncio
    async def test_rows_keep_order(self, engine, fake_translator, node):
        rows = [{"question": f"Q{i}", "answer": f"A{i}"} for i in range(3)]
        field = ContentField(name="faq", value=rows, parent=node)

        result = await engine.translate_field(field, "de", spec("faq", FAQ))

        assert result.value == [{"question": f"de:Q{i}", "answer": f"de:A{i}"} for i in range(3)]
        assert fake_translator.texts == ["Q0", "A0", "Q1", "A1", "Q2", "A2"]

    @pytest.mark.asyncio
    async def test_empty_structure_stays_empty(self, engine, fake_translator, node):
        field = ContentField(name="faq", value=[], parent=node)
        result = await engine.translate_field(field, "de", spec("faq", FAQ))

        assert result.value == []
        assert fake_translator.calls == []

    @pytest.mark.asyncio
    async def test_undeclared_row_keys_are_dropped(self, engine, node):
        field = ContentField(name="faq", value=[{"question": "Why?", "internal": "x"}], parent=node)
        result = await engine.translate_field(field, "de", spec("faq", FAQ))

        assert result.value == [{"question": "de:Why?", "answer": None}]

    @pytest.mark.asyncio
    async def test_non_list_passes_through(self, engine, fake_translator, node):
        field = ContentField(name="faq", value="just text", parent=node)
        result = await engine.translate_field(field, "de", spec("faq", FAQ))

        assert result is field
        assert fake_translator.calls == []


# =============================================================================
# Blocks
# =============================================================================


BLOCKS = {
    "type": "blocks",
    "fieldsets": {
        "heading": {"fields": {"text": {"type": "text"}, "level": {"type": "select"}}},
        "quote": {"fields": {"Text": {"type": "writer"}, "citation": {"type": "text", "translate": False}}},
    },
}


def heading(text, block_id="b1", hidden=False):
    return {"content": {"text": text, "level": "h2"}, "id": block_id, "isHidden": hidden, "type": "heading"}


class TestBlocks:
    @pytest.mark.asyncio
    async def test_blocks_get_fresh_ids(self, engine, node):
        value = [heading("Hello", "b1"), heading("World", "b2", hidden=True)]
        field = ContentField(name="body", value=value, parent=node)

        result = await engine.translate_field(field, "de", spec("body", BLOCKS))

        assert [b["content"]["text"] for b in result.value] == ["de:Hello", "de:World"]
        assert [b["content"]["level"] for b in result.value] == ["h2", "h2"]
        assert [b["isHidden"] for b in result.value] == [False, True]
        assert [b["type"] for b in result.value] == ["heading", "heading"]
        ids = [b["id"] for b in result.value]
        assert "b1" not in ids and "b2" not in ids
        assert len(set(ids)) == 2

    @pytest.mark.asyncio
    async def test_unknown_block_type_keeps_content(self, engine, fake_translator, node):
        gallery = {"content": {"caption": "Photos"}, "id": "g1", "isHidden": False, "type": "carousel"}
        field = ContentField(name="body", value=[gallery, heading("Hi")], parent=node)

        result = await engine.translate_field(field, "de", spec("body", BLOCKS))

        assert result.value[0]["type"] == "carousel"
        assert result.value[0]["content"] == {"caption": "Photos"}
        assert result.value[0]["id"] != "g1"
        assert fake_translator.texts == ["Hi"]

    @pytest.mark.asyncio
    async def test_content_keys_match_fieldset_ignoring_case(self, engine, node):
        quote = {"content": {"text": "To be", "citation": "Hamlet"}, "id": "q1", "type": "quote"}
        field = ContentField(name="body", value=[quote], parent=node)

        result = await engine.translate_field(field, "de", spec("body", BLOCKS))

        assert result.value[0]["content"] == {"text": "de:To be", "citation": "Hamlet"}

    @pytest.mark.asyncio
    async def test_json_string_round_trip(self, engine, node):
        field = ContentField(name="body", value=json.dumps([heading("Hello")]), parent=node)

        result = await engine.translate_field(field, "de", spec("body", BLOCKS))

        assert isinstance(result.value, str)
        assert json.loads(result.value)[0]["content"]["text"] == "de:Hello"

    @pytest.mark.asyncio
    async def test_core_fieldsets_by_default(self, engine, fake_translator, node):
        value = [
            {"content": {"text": "<p>Intro</p>"}, "id": "t1", "type": "text"},
            {"content": {"code": "print()", "language": "python"}, "id": "c1", "type": "code"},
        ]
        field = ContentField(name="body", value=value, parent=node)

        result = await engine.translate_field(field, "de", spec("body", {"type": "blocks"}))

        assert result.value[0]["content"]["text"] == "de:<p>Intro</p>"
        assert result.value[1]["content"] == {"code": "print()", "language": "python"}
        assert fake_translator.texts == ["<p>Intro</p>"]

    @pytest.mark.asyncio
    async def test_no_parent_returns_blocks_unchanged(self, engine, fake_translator):
        field = ContentField(name="body", value=[heading("Hello")], parent=None)

        result = await engine.translate_field(field, "de", spec("body", BLOCKS))

        assert result is field
        assert fake_translator.calls == []

    @pytest.mark.asyncio
    async def test_translate_blocks_without_parent(self, engine, fake_translator):
        blocks = [Block.from_dict(heading("Hello"))]
        assert await engine.translate_blocks(blocks, "de", spec("body", BLOCKS), None) == blocks
        assert fake_translator.calls == []

    @pytest.mark.asyncio
    async def test_undecodable_value_passes_through(self, engine, fake_translator, node):
        field = ContentField(name="body", value="{not json", parent=node)

        result = await engine.translate_field(field, "de", spec("body", BLOCKS))

        assert result is field
        assert fake_translator.calls == []

    @pytest.mark.asyncio
    async def test_non_mapping_entry_passes_field_through(self, engine, fake_translator, node):
        field = ContentField(name="body", value=[heading("Hello"), "garbage"], parent=node)

        result = await engine.translate_field(field, "de", spec("body", BLOCKS))

        assert result is field
        assert len(result.value) == 2
        assert fake_translator.calls == []

    @pytest.mark.asyncio
    async def test_nested_structure_in_block(self, engine, node):
        definition = {
            "type": "blocks",
            "fieldsets": {
                "faq": {"fields": {"items": FAQ}},
            },
        }
        block = {"content": {"items": [{"question": "Why?", "answer": "Because"}]}, "id": "f1", "type": "faq"}
        field = ContentField(name="body", value=[block], parent=node)

        result = await engine.translate_field(field, "de", spec("body", definition))

        assert result.value[0]["content"]["items"] == [{"question": "de:Why?", "answer": "de:Because"}]


# =============================================================================
# Layout
# =============================================================================


LAYOUT = {"type": "layout", "fieldsets": BLOCKS["fieldsets"]}


def layout_value():
    return [
        {
            "attrs": {"class": "hero", "background": {"color": "#fff"}},
            "columns": [
                {"blocks": [heading("Left")], "id": "c1", "width": "1/2"},
                {"blocks": [heading("Right", "b2"), heading("More", "b3")], "id": "c2", "width": "1/2"},
            ],
            "id": "row-1",
        },
        {"attrs": [], "columns": [{"blocks": [], "id": "c3", "width": "1/1"}], "id": "row-2"},
    ]


class TestLayout:
    @pytest.mark.asyncio
    async def test_structure_is_preserved(self, engine, node):
        value = layout_value()
        field = ContentField(name="page", value=value, parent=node)

        result = await engine.translate_field(field, "de", spec("page", LAYOUT))
        rows = result.value

        assert len(rows) == 2
        assert [row["id"] for row in rows] == ["row-1", "row-2"]
        assert [c["width"] for c in rows[0]["columns"]] == ["1/2", "1/2"]
        assert [c["id"] for c in rows[0]["columns"]] == ["c1", "c2"]
        assert [len(c["blocks"]) for c in rows[0]["columns"]] == [1, 2]
        assert [b["content"]["text"] for b in rows[0]["columns"][1]["blocks"]] == ["de:Right", "de:More"]
        assert rows[0]["columns"][0]["blocks"][0]["id"] != "b1"

    @pytest.mark.asyncio
    async def test_attrs_are_copied_verbatim(self, engine, fake_translator, node):
        value = layout_value()
        field = ContentField(name="page", value=value, parent=node)

        result = await engine.translate_field(field, "de", spec("page", LAYOUT))

        assert result.value[0]["attrs"] == {"class": "hero", "background": {"color": "#fff"}}
        assert result.value[1]["attrs"] == []
        assert result.value[0]["attrs"] is not value[0]["attrs"]
        assert "hero" not in fake_translator.texts

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "bad_row",
        [
            "garbage",
            {"columns": ["garbage"]},
            {"columns": [{"blocks": ["garbage"], "width": "1/1"}]},
        ],
    )
    async def test_non_mapping_entries_pass_field_through(self, engine, fake_translator, node, bad_row):
        value = layout_value() + [bad_row]
        field = ContentField(name="page", value=value, parent=node)

        result = await engine.translate_field(field, "de", spec("page", LAYOUT))

        assert result is field
        assert len(result.value) == 3
        assert fake_translator.calls == []

    @pytest.mark.asyncio
    async def test_translate_layout_model(self, engine, node):
        layout = Layout(
            attrs={"icon": "star"},
            columns=[LayoutColumn(blocks=[Block.from_dict(heading("Hi"))], width="2/3")],
            id="row",
        )

        result = await engine.translate_layout(layout, "de", spec("page", LAYOUT), node)

        assert result.id == "row"
        assert result.attrs == {"icon": "star"}
        assert result.columns[0].width == "2/3"
        assert result.columns[0].id == layout.columns[0].id
        assert result.columns[0].blocks[0].content["text"] == "de:Hi"


# =============================================================================
# Depth & errors
# =============================================================================


def nested_object(depth):
    definition = {"type": "text"}
    value = "deep"
    for _ in range(depth):
        definition = {"type": "object", "fields": {"inner": definition}}
        value = {"inner": value}
    return definition, value


class TestLimits:
    @pytest.mark.asyncio
    async def test_within_depth_limit(self, fake_translator, node):
        engine = ContentTranslator(fake_translator, max_depth=3)
        definition, value = nested_object(3)
        field = ContentField(name="root", value=value, parent=node)

        result = await engine.translate_field(field, "de", spec("root", definition))

        assert result.value == {"inner": {"inner": {"inner": "de:deep"}}}

    @pytest.mark.asyncio
    async def test_too_deep_raises(self, fake_translator, node):
        engine = ContentTranslator(fake_translator, max_depth=3)
        definition, value = nested_object(4)
        field = ContentField(name="root", value=value, parent=node)

        with pytest.raises(NestingDepthError):
            await engine.translate_field(field, "de", spec("root", definition))
        assert fake_translator.calls == []

    @pytest.mark.asyncio
    async def test_provider_error_aborts(self, engine, fake_translator, node):
        fake_translator.error = ProviderError("Quota exceeded", status_code=456)
        field = ContentField(name="faq", value=[{"question": "Q", "answer": "A"}], parent=node)

        with pytest.raises(ProviderError, match="Quota exceeded"):
            await engine.translate_field(field, "de", spec("faq", FAQ))


# =============================================================================
# Content nodes
# =============================================================================


class TestTranslateNode:
    @pytest.mark.asyncio
    async def test_translates_declared_fields(self, engine, fake_translator):
        blueprint = Blueprint.from_dict(
            {
                "name": "home",
                "fields": {
                    "title": {"type": "text"},
                    "date": {"type": "date"},
                    "body": {"type": "blocks", "fieldsets": ["heading"]},
                },
            }
        )
        node = ContentNode(
            id="home",
            language="en",
            content={
                "Title": "Welcome",
                "date": "2024-05-01",
                "body": [{"content": {"level": "h1", "text": "Hi"}, "id": "x", "type": "heading"}],
                "uuid": "abc",
            },
        )

        translated = await engine.translate_node(node, "de", blueprint)

        assert translated.id == "home"
        assert translated.language == "de"
        assert translated.content["Title"] == "de:Welcome"
        assert translated.content["date"] == "2024-05-01"
        assert translated.content["uuid"] == "abc"
        assert translated.content["body"][0]["content"]["text"] == "de:Hi"
        assert node.content["Title"] == "Welcome"
        assert fake_translator.texts == ["Welcome", "Hi"]
