"""Markup tree -> lightweight text.

Total over any tree: kinds without a dedicated handler fall back to their
children's inline content, so text is flattened rather than dropped.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from quillmark.nodes import Kind, MarkupNode

_WHITESPACE = re.compile(r"\s+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def serialize(root: MarkupNode) -> str:
    """Serialize a markup tree to lightweight text."""
    return _EXCESS_NEWLINES.sub("\n\n", _node(root)).strip()


def _inline(nodes: Iterable[MarkupNode]) -> str:
    return "".join(_node(n) for n in nodes).strip()


def _node(node: MarkupNode) -> str:
    handler = _HANDLERS.get(node.kind, _fallback)
    return handler(node)


def _fallback(node: MarkupNode) -> str:
    return _inline(node.children)


def _text(node: MarkupNode) -> str:
    return _WHITESPACE.sub(" ", node.text)


def _heading(node: MarkupNode) -> str:
    level = min(6, max(1, node.level or 1))
    return "#" * level + " " + _inline(node.children) + "\n\n"


def _block(node: MarkupNode) -> str:
    return _inline(node.children) + "\n\n"


def _code_block(node: MarkupNode) -> str:
    literal = node.text or node.text_content()
    return "```\n" + literal + "\n```\n\n"


def _link(node: MarkupNode) -> str:
    return "[" + _inline(node.children) + "](" + (node.url or "") + ")"


def _wrapper(marker: str) -> Callable[[MarkupNode], str]:
    def render(node: MarkupNode) -> str:
        return marker + _inline(node.children) + marker

    return render


def _item_content(item: MarkupNode) -> str:
    if item.kind == Kind.LIST_ITEM:
        return _inline(item.children)
    return _inline([item])


def _list_items(node: MarkupNode) -> list[str]:
    items = []
    for child in node.children:
        if child.kind == Kind.TEXT and not child.text.strip():
            continue
        items.append(_item_content(child))
    return items


def _unordered(node: MarkupNode) -> str:
    return "\n".join("- " + item for item in _list_items(node)) + "\n\n"


def _ordered(node: MarkupNode) -> str:
    lines = [f"{i}. {item}" for i, item in enumerate(_list_items(node), start=1)]
    return "\n".join(lines) + "\n\n"


def _stray_item(node: MarkupNode) -> str:
    # A list item reached here has no enclosing list.
    return _inline(node.children) + "\n"


_HANDLERS: dict[str, Callable[[MarkupNode], str]] = {
    Kind.TEXT: _text,
    Kind.HEADING: _heading,
    Kind.PARAGRAPH: _block,
    Kind.BLOCK: _block,
    Kind.LINE_BREAK: lambda node: "\n",
    Kind.BOLD: _wrapper("**"),
    Kind.ITALIC: _wrapper("*"),
    Kind.CODE: _wrapper("`"),
    Kind.CODE_BLOCK: _code_block,
    Kind.LINK: _link,
    Kind.UNORDERED_LIST: _unordered,
    Kind.ORDERED_LIST: _ordered,
    Kind.LIST_ITEM: _stray_item,
}
