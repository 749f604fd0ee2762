"""Markup tree model shared by both conversion directions."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict


class Kind:
    """Known node kinds. Any other string is treated as an unknown kind."""

    TEXT = "text"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LINE_BREAK = "line_break"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    CODE_BLOCK = "code_block"
    LINK = "link"
    UNORDERED_LIST = "unordered_list"
    ORDERED_LIST = "ordered_list"
    LIST_ITEM = "list_item"
    BLOCK = "block"


LIST_KINDS = frozenset({Kind.UNORDERED_LIST, Kind.ORDERED_LIST})


class MarkupNode(BaseModel):
    """One node of the markup tree.

    - frozen=True: converters never mutate the trees they are handed
    - extra="ignore": hosts may attach fields we don't know about
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: str
    text: str = ""
    url: str | None = None
    level: int | None = None
    children: tuple[MarkupNode, ...] = ()

    def text_content(self) -> str:
        """Concatenated Text payloads of this subtree."""
        if self.kind in (Kind.TEXT, Kind.CODE_BLOCK) and not self.children:
            return self.text
        return "".join(child.text_content() for child in self.children)

    def walk(self) -> Iterator[MarkupNode]:
        """Yield this node and its descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


MarkupNode.model_rebuild()


Child = MarkupNode | str


def _wrap(children: tuple[Child, ...]) -> tuple[MarkupNode, ...]:
    return tuple(text(c) if isinstance(c, str) else c for c in children)


def text(value: str) -> MarkupNode:
    return MarkupNode(kind=Kind.TEXT, text=value)


def heading(level: int, *children: Child) -> MarkupNode:
    return MarkupNode(kind=Kind.HEADING, level=level, children=_wrap(children))


def paragraph(*children: Child) -> MarkupNode:
    return MarkupNode(kind=Kind.PARAGRAPH, children=_wrap(children))


def line_break() -> MarkupNode:
    return MarkupNode(kind=Kind.LINE_BREAK)


def bold(*children: Child) -> MarkupNode:
    return MarkupNode(kind=Kind.BOLD, children=_wrap(children))


def italic(*children: Child) -> MarkupNode:
    return MarkupNode(kind=Kind.ITALIC, children=_wrap(children))


def code(*children: Child) -> MarkupNode:
    return MarkupNode(kind=Kind.CODE, children=_wrap(children))


def code_block(literal: str) -> MarkupNode:
    return MarkupNode(kind=Kind.CODE_BLOCK, text=literal)


def link(url: str | None, *children: Child) -> MarkupNode:
    return MarkupNode(kind=Kind.LINK, url=url, children=_wrap(children))


def list_item(*children: Child) -> MarkupNode:
    return MarkupNode(kind=Kind.LIST_ITEM, children=_wrap(children))


def _items(children: tuple[Child, ...]) -> tuple[MarkupNode, ...]:
    # Bare strings become single-text items.
    return tuple(list_item(c) if isinstance(c, str) else c for c in children)


def unordered_list(*items: Child) -> MarkupNode:
    return MarkupNode(kind=Kind.UNORDERED_LIST, children=_items(items))


def ordered_list(*items: Child) -> MarkupNode:
    return MarkupNode(kind=Kind.ORDERED_LIST, children=_items(items))


def block(*children: Child) -> MarkupNode:
    return MarkupNode(kind=Kind.BLOCK, children=_wrap(children))


def document(*children: MarkupNode) -> MarkupNode:
    """Root node: a generic block holding top-level blocks."""
    return MarkupNode(kind=Kind.BLOCK, children=tuple(children))
