"""Tests for the markup node model and builders."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from quillmark.nodes import (
    Kind,
    MarkupNode,
    bold,
    code_block,
    document,
    heading,
    line_break,
    link,
    list_item,
    paragraph,
    text,
    unordered_list,
)


class TestBuilders:
    def test_strings_become_text_nodes(self) -> None:
        node = paragraph("a", bold("b"))
        assert node.children[0] == text("a")
        assert node.children[1].kind == Kind.BOLD
        assert node.children[1].children == (text("b"),)

    def test_list_strings_become_items(self) -> None:
        node = unordered_list("a", list_item("b"))
        assert [c.kind for c in node.children] == [Kind.LIST_ITEM, Kind.LIST_ITEM]
        assert node.children[0].children == (text("a"),)

    def test_heading_level(self) -> None:
        node = heading(3, "x")
        assert node.kind == Kind.HEADING
        assert node.level == 3

    def test_link_url(self) -> None:
        node = link("https://x.test", "site")
        assert node.url == "https://x.test"
        assert node.text_content() == "site"

    def test_document_is_generic_block(self) -> None:
        assert document().kind == Kind.BLOCK
        assert document().children == ()


class TestMarkupNode:
    def test_frozen(self) -> None:
        node = text("a")
        with pytest.raises(ValidationError):
            node.text = "b"  # type: ignore[misc]

    def test_extra_fields_ignored(self) -> None:
        node = MarkupNode(kind=Kind.TEXT, text="a", style="color: red")  # type: ignore[call-arg]
        assert node.text == "a"
        assert not hasattr(node, "style")

    def test_validate_from_dict(self) -> None:
        node = MarkupNode.model_validate({"kind": "paragraph", "children": [{"kind": "text", "text": "hi"}]})
        assert node == paragraph("hi")

    def test_text_content(self) -> None:
        node = paragraph("a", bold("b"), line_break(), code_block("c"))
        assert node.text_content() == "abc"

    def test_walk_pre_order(self) -> None:
        node = paragraph("a", bold("b"))
        assert [n.kind for n in node.walk()] == [Kind.PARAGRAPH, Kind.TEXT, Kind.BOLD, Kind.TEXT]
