"""Output formatting: table, JSON, JSONL, and stderr diagnostics."""

from __future__ import annotations

import io
import json
import sys
from typing import Any

from quillmark.nodes import LIST_KINDS, MarkupNode
from quillmark.serializer import serialize

OUTLINE_COLUMNS = ["index", "kind", "level", "items", "preview"]

_PREVIEW_LENGTH = 48


def format_json(data: Any, indent: int = 2) -> str:
    """Format data as JSON string."""
    return json.dumps(data, indent=indent, default=str, ensure_ascii=False)


def format_jsonl(items: list[dict[str, Any]]) -> str:
    """Format items as line-delimited JSON (one JSON object per line)."""
    lines = [json.dumps(item, default=str, ensure_ascii=False) for item in items]
    return "\n".join(lines)


def format_table(rows: list[dict[str, Any]], columns: list[str] | None = None) -> str:
    """Format rows as a pretty aligned table using rich."""
    if not rows:
        return "Empty document."
    from rich.console import Console
    from rich.table import Table
    from rich.text import Text

    cols = columns or list(rows[0].keys())
    table = Table(show_header=True, header_style="bold")
    for col in cols:
        table.add_column(col, no_wrap=col in ("index", "kind"))

    for row in rows:
        # Text, not str: previews hold [brackets] rich would read as markup.
        table.add_row(*[Text(_cell(row.get(c))) for c in cols])

    buf = io.StringIO()
    console = Console(file=buf, force_terminal=False, width=160)
    console.print(table)
    return buf.getvalue()


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def outline_rows(tree: MarkupNode) -> list[dict[str, Any]]:
    """One row per top-level block of a document node."""
    rows: list[dict[str, Any]] = []
    for i, block in enumerate(tree.children, start=1):
        preview = serialize(block).replace("\n", " ")
        if len(preview) > _PREVIEW_LENGTH:
            preview = preview[: _PREVIEW_LENGTH - 1] + "…"
        rows.append(
            {
                "index": i,
                "kind": block.kind,
                "level": block.level,
                "items": len(block.children) if block.kind in LIST_KINDS else None,
                "preview": preview,
            }
        )
    return rows


def tree_data(tree: MarkupNode) -> dict[str, Any]:
    """Plain-dict dump of a tree, without unset attributes."""
    result: dict[str, Any] = tree.model_dump(mode="json", exclude_defaults=True)
    return result


def render(tree: MarkupNode, fmt: str = "table") -> str:
    """Render a parsed tree in the specified format."""
    if fmt == "json":
        return format_json(tree_data(tree))
    elif fmt == "jsonl":
        return format_jsonl([tree_data(block) for block in tree.children])
    elif fmt == "table":
        return format_table(outline_rows(tree), OUTLINE_COLUMNS)
    else:
        return format_json(tree_data(tree))


def emit_event(event: str, **fields: Any) -> None:
    """Write a compact JSON diagnostic line to stderr."""
    msg = {"event": event, **fields}
    print(json.dumps(msg, separators=(",", ":"), default=str, ensure_ascii=False), file=sys.stderr)
