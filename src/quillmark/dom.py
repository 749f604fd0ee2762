"""Editor HTML -> markup tree, the reading side of the host editor."""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from quillmark.nodes import Kind, MarkupNode, document

_SIMPLE_TAGS = {
    "p": Kind.PARAGRAPH,
    "div": Kind.BLOCK,
    "strong": Kind.BOLD,
    "b": Kind.BOLD,
    "em": Kind.ITALIC,
    "i": Kind.ITALIC,
    "code": Kind.CODE,
    "ul": Kind.UNORDERED_LIST,
    "ol": Kind.ORDERED_LIST,
    "li": Kind.LIST_ITEM,
}

_HEADING_TAGS = {f"h{n}": n for n in range(1, 7)}

_BLOCK_TAGS = frozenset({"p", "div", "pre", "ul", "ol", "li", *_HEADING_TAGS})


def tree_from_html(html: str) -> MarkupNode:
    """Read an editor HTML fragment into a document node."""
    soup = BeautifulSoup(html or "", "html.parser")
    return document(*_children(soup))


def _children(tag: Tag) -> tuple[MarkupNode, ...]:
    nodes = (_convert(child) for child in tag.children)
    return tuple(n for n in nodes if n is not None)


def _convert(el: object) -> MarkupNode | None:
    # Comments, doctypes, CDATA and processing instructions are all
    # PreformattedString subclasses and carry no visible text.
    if isinstance(el, PreformattedString):
        return None
    if isinstance(el, NavigableString):
        if not el.strip() and (_is_block(el.previous_sibling) or _is_block(el.next_sibling)):
            return None
        return MarkupNode(kind=Kind.TEXT, text=str(el))
    if not isinstance(el, Tag):
        return None

    name = el.name.lower()
    if name in _HEADING_TAGS:
        return MarkupNode(kind=Kind.HEADING, level=_HEADING_TAGS[name], children=_children(el))
    if name == "br":
        return MarkupNode(kind=Kind.LINE_BREAK)
    if name == "pre":
        return MarkupNode(kind=Kind.CODE_BLOCK, text=el.get_text())
    if name == "a":
        href = el.get("href")
        url = href if isinstance(href, str) else None
        return MarkupNode(kind=Kind.LINK, url=url, children=_children(el))
    # Unrecognized tags keep their name; the serializer flattens them.
    return MarkupNode(kind=_SIMPLE_TAGS.get(name, f"html:{name}"), children=_children(el))


def _is_block(el: object) -> bool:
    # Whitespace next to a block element is source formatting, not content.
    return isinstance(el, Tag) and el.name.lower() in _BLOCK_TAGS
