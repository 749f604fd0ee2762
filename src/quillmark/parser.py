"""Lightweight text -> markup tree.

Parsing is an ordered pipeline of grammar stages. Each stage takes the output
of the previous one, so the order in :func:`parse` is load-bearing: code
fences are claimed before headings and emphasis can see their contents, and
emphasis is resolved before links so a link label may carry emphasis.

The stream between stages is a list of segments:

- ``str``: an unclaimed line of escaped text, possibly holding inline tags
  emitted by the emphasis and link stages
- :class:`Pending`: a claimed block whose inline content is still tag markup
- :class:`MarkupNode`: a finished block (code blocks)

Every ``<`` typed by the user is escaped by the first stage, so the only real
tags in the stream are the ones stages emit. :func:`build_document` reads those
tags back into nodes and unescapes text exactly once.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Union

from quillmark.escaper import escape_text, unescape_text
from quillmark.nodes import Kind, MarkupNode, code_block, document

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class Pending:
    """A claimed block whose lines still carry inline tag markup."""

    kind: str
    lines: tuple[str, ...]
    level: int | None = None


Segment = Union[str, Pending, MarkupNode]

_NEWLINES = re.compile(r"\r\n?")
_FENCE_OPEN = re.compile(r"^```[\w+.-]*\s*$")
_FENCE_CLOSE = re.compile(r"^```\s*$")
# Longest prefix first: a six-hash line must not be read as a level-1 heading.
_HEADINGS = [(level, re.compile(r"^" + "#" * level + r"\s+(\S.*?)\s*$")) for level in range(6, 0, -1)]
_CODE_SPAN = re.compile(r"`([^`]+)`")
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"\*(.+?)\*")
_EMITTED_CODE = re.compile(r"<code>(.*?)</code>")
_TOKEN = re.compile(r"<(\d+)>")
_LINK = re.compile(r"\[([^\]]+)\]\(([^)]*)\)")
_UNORDERED_ITEM = re.compile(r"^-\s+(\S.*)$")
_ORDERED_ITEM = re.compile(r"^\d+\.\s+(\S.*)$")
_TAG = re.compile(r'<(/?)(strong|em|code|a)(?: href="([^"]*)")?>')

_TAG_KINDS = {"strong": Kind.BOLD, "em": Kind.ITALIC, "code": Kind.CODE, "a": Kind.LINK}
_EMPHASIS_MARKERS = {"<strong>": "**", "</strong>": "**", "<em>": "*", "</em>": "*"}


def parse(text: str) -> MarkupNode:
    """Parse lightweight text into a document node. Never raises."""
    segments = fence_stage(escape_stage(text))
    for stage in _STAGES:
        segments = stage(segments)
    return build_document(segments)


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def escape_stage(text: str) -> str:
    """Normalize line endings and escape ``& < >``."""
    return escape_text(_NEWLINES.sub("\n", text))


def fence_stage(text: str) -> list[Segment]:
    """Split into lines, claiming fenced regions as code blocks.

    An opening fence without a closing one turns the rest of the document
    into a single code block.
    """
    lines = text.split("\n")
    segments: list[Segment] = []
    i = 0
    while i < len(lines):
        if not _FENCE_OPEN.match(lines[i]):
            segments.append(lines[i])
            i += 1
            continue
        end = i + 1
        while end < len(lines) and not _FENCE_CLOSE.match(lines[end]):
            end += 1
        literal = "\n".join(lines[i + 1 : end])
        segments.append(code_block(unescape_text(literal)))
        i = end + 1
    return segments


def heading_stage(segments: list[Segment]) -> list[Segment]:
    """Claim ``#``..``######`` lines as headings."""
    return [_heading(s) if isinstance(s, str) else s for s in segments]


def _heading(line: str) -> Segment:
    for level, pattern in _HEADINGS:
        m = pattern.match(line)
        if m:
            return Pending(Kind.HEADING, (m.group(1),), level=level)
    return line


def emphasis_stage(segments: list[Segment]) -> list[Segment]:
    """Emit code, bold and italic tags, one line at a time."""
    return _map_lines(segments, _emphasis)


def _protect(line: str, pattern: re.Pattern[str]) -> tuple[str, list[str]]:
    """Swap each match of *pattern* for a ``<N>`` token, returning the line and the stashed contents.

    The stream is escaped, so a bare ``<`` followed by digits can only be a token.
    """
    stash: list[str] = []

    def _token(m: re.Match[str]) -> str:
        stash.append(m.group(1))
        return f"<{len(stash) - 1}>"

    return pattern.sub(_token, line), stash


def _restore(line: str, stash: list[str], wrap: str = "<code>{}</code>") -> str:
    return _TOKEN.sub(lambda m: wrap.format(stash[int(m.group(1))]), line)


def _emphasis(line: str) -> str:
    line, spans = _protect(line, _CODE_SPAN)
    line = _BOLD.sub(r"<strong>\1</strong>", line)
    line = _ITALIC.sub(r"<em>\1</em>", line)
    return _restore(line, spans)


def link_stage(segments: list[Segment]) -> list[Segment]:
    """Emit anchor tags for ``[text](url)`` outside code spans."""
    return _map_lines(segments, _links)


def _links(line: str) -> str:
    line, spans = _protect(line, _EMITTED_CODE)

    def _anchor(m: re.Match[str]) -> str:
        # Asterisks and backticks in a url are literal, undo what the emphasis stage did to them.
        url = _restore(m.group(2), spans, wrap="`{}`")
        for tag, marker in _EMPHASIS_MARKERS.items():
            url = url.replace(tag, marker)
        url = url.replace('"', "&quot;")
        return f'<a href="{url}">{m.group(1)}</a>'

    return _restore(_LINK.sub(_anchor, line), spans)


def list_stage(segments: list[Segment]) -> list[Segment]:
    """Group maximal runs of ``- x`` or ``N. x`` lines into lists.

    A line of the other list kind ends the current run and starts a new list.
    """
    out: list[Segment] = []
    run_kind: str | None = None
    items: list[str] = []

    def flush() -> None:
        if run_kind is not None:
            out.append(Pending(run_kind, tuple(items)))
        items.clear()

    for segment in segments:
        kind, content = _list_line(segment)
        if kind != run_kind:
            flush()
            run_kind = kind
        if kind is None:
            out.append(segment)
        else:
            items.append(content)
    flush()
    return out


def _list_line(segment: Segment) -> tuple[str | None, str]:
    if not isinstance(segment, str):
        return None, ""
    m = _UNORDERED_ITEM.match(segment)
    if m:
        return Kind.UNORDERED_LIST, m.group(1)
    m = _ORDERED_ITEM.match(segment)
    if m:
        return Kind.ORDERED_LIST, m.group(1)
    return None, ""


def paragraph_stage(segments: list[Segment]) -> list[Segment]:
    """Gather the remaining lines into paragraphs split on blank lines."""
    out: list[Segment] = []
    lines: list[str] = []

    def flush() -> None:
        if lines:
            out.append(Pending(Kind.PARAGRAPH, tuple(lines)))
        lines.clear()

    for segment in segments:
        if isinstance(segment, str) and segment.strip():
            lines.append(segment)
            continue
        flush()
        if not isinstance(segment, str):
            out.append(segment)
    flush()
    return out


def _map_lines(segments: list[Segment], fn: Callable[[str], str]) -> list[Segment]:
    out: list[Segment] = []
    for segment in segments:
        if isinstance(segment, str):
            out.append(fn(segment))
        elif isinstance(segment, Pending):
            out.append(replace(segment, lines=tuple(fn(line) for line in segment.lines)))
        else:
            out.append(segment)
    return out


_STAGES: list[Callable[[list[Segment]], list[Segment]]] = [
    heading_stage,
    emphasis_stage,
    link_stage,
    list_stage,
    paragraph_stage,
]


# ---------------------------------------------------------------------------
# Tree building
# ---------------------------------------------------------------------------


def build_document(segments: list[Segment]) -> MarkupNode:
    """Turn the staged segments into a document node."""
    blocks: list[MarkupNode] = []
    for segment in segments:
        if isinstance(segment, MarkupNode):
            blocks.append(segment)
        elif isinstance(segment, Pending):
            blocks.append(_build_block(segment))
        # Bare strings only survive here when paragraph_stage was skipped.
    return document(*blocks)


def _build_block(pending: Pending) -> MarkupNode:
    if pending.kind in (Kind.UNORDERED_LIST, Kind.ORDERED_LIST):
        items = tuple(MarkupNode(kind=Kind.LIST_ITEM, children=inline_nodes(line)) for line in pending.lines)
        return MarkupNode(kind=pending.kind, children=items)
    children: list[MarkupNode] = []
    for i, line in enumerate(pending.lines):
        if i:
            children.append(MarkupNode(kind=Kind.LINE_BREAK))
        children.extend(inline_nodes(line))
    return MarkupNode(kind=pending.kind, level=pending.level, children=tuple(children))


def inline_nodes(markup: str) -> tuple[MarkupNode, ...]:
    """Read emitted inline tags back into nodes.

    Lenient: a closing tag with no opener is dropped, a closing tag that skips
    open inner tags closes them too, and anything left open is closed at the
    end of the line.
    """
    # Each frame is (kind, url, children); the bottom frame is the line itself.
    stack: list[tuple[str, str | None, list[MarkupNode]]] = [("", None, [])]

    def close_top() -> None:
        kind, url, children = stack.pop()
        stack[-1][2].append(MarkupNode(kind=kind, url=url, children=tuple(children)))

    pos = 0
    for m in _TAG.finditer(markup):
        _add_text(stack[-1][2], markup[pos : m.start()])
        pos = m.end()
        closing, name, href = m.groups()
        kind = _TAG_KINDS[name]
        if not closing:
            url = unescape_text(href) if href is not None else None
            stack.append((kind, url, []))
            continue
        depth = next((i for i in range(len(stack) - 1, 0, -1) if stack[i][0] == kind), None)
        if depth is None:
            continue
        while len(stack) > depth:
            close_top()
    _add_text(stack[-1][2], markup[pos:])
    while len(stack) > 1:
        close_top()
    return tuple(stack[0][2])


def _add_text(children: list[MarkupNode], escaped: str) -> None:
    if escaped:
        children.append(MarkupNode(kind=Kind.TEXT, text=unescape_text(escaped)))
