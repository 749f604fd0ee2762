"""Markup tree -> HTML preview, plain text, and print view."""

from __future__ import annotations

import re

from quillmark.escaper import escape_html, escape_text
from quillmark.nodes import Kind, MarkupNode

_EXCESS_NEWLINES = re.compile(r"\n{3,}")

# Elements the editor's plain-text export follows with a newline.
_PLAIN_BLOCK_KINDS = frozenset({Kind.PARAGRAPH, Kind.BLOCK, Kind.HEADING, Kind.LIST_ITEM})

_TAGS = {
    Kind.BOLD: "strong",
    Kind.ITALIC: "em",
    Kind.CODE: "code",
    Kind.PARAGRAPH: "p",
    Kind.LIST_ITEM: "li",
    Kind.UNORDERED_LIST: "ul",
    Kind.ORDERED_LIST: "ol",
    Kind.BLOCK: "div",
}


def render_html(tree: MarkupNode) -> str:
    """Render a tree as preview HTML.

    A document node renders its blocks one per line; any other node renders
    as itself.
    """
    if tree.kind == Kind.BLOCK:
        return "\n".join(_html(child) for child in tree.children)
    return _html(tree)


def _html(node: MarkupNode) -> str:
    if node.kind == Kind.TEXT:
        return escape_text(node.text)
    if node.kind == Kind.LINE_BREAK:
        return "<br>"
    if node.kind == Kind.HEADING:
        level = min(6, max(1, node.level or 1))
        return f"<h{level}>{_html_children(node)}</h{level}>"
    if node.kind == Kind.CODE_BLOCK:
        literal = node.text or node.text_content()
        return f"<pre><code>{escape_text(literal)}</code></pre>"
    if node.kind == Kind.LINK:
        if node.url is None:
            return f"<a>{_html_children(node)}</a>"
        return f'<a href="{escape_html(node.url)}">{_html_children(node)}</a>'
    tag = _TAGS.get(node.kind)
    if tag is None:
        return _html_children(node)
    return f"<{tag}>{_html_children(node)}</{tag}>"


def _html_children(node: MarkupNode) -> str:
    return "".join(_html(child) for child in node.children)


def plain_text(tree: MarkupNode) -> str:
    """Visible text of the tree, as the editor's text export produces it."""
    return _EXCESS_NEWLINES.sub("\n\n", _plain(tree)).strip()


def _plain(node: MarkupNode) -> str:
    if node.kind == Kind.LINE_BREAK:
        return "\n"
    if node.kind == Kind.TEXT or (node.kind == Kind.CODE_BLOCK and not node.children):
        return node.text
    text = "".join(_plain(child) for child in node.children)
    if node.kind in _PLAIN_BLOCK_KINDS:
        text += "\n"
    return text


_PRINT_TEMPLATE = (
    '<!doctype html><html><head><meta charset="utf-8"><title>{title}</title></head><body>'
    '<pre style="white-space:pre-wrap; word-wrap:break-word; font-family:inherit;">{body}</pre>'
    "</body></html>"
)


def print_view(text: str, title: str = "Print Editor Text") -> str:
    """A standalone printable page showing ``text`` verbatim."""
    return _PRINT_TEMPLATE.format(title=escape_html(title), body=escape_html(text))

