"""HTML escaping helpers shared by the parser, the renderer and the print view.

None of these are idempotent. ``escape_html(escape_html(s))`` turns ``&lt;``
into ``&amp;lt;``; apply them exactly once per literal insertion.
"""

from __future__ import annotations

import html

_HTML_ENTITIES = {
    ord("&"): "&amp;",
    ord("<"): "&lt;",
    ord(">"): "&gt;",
    ord('"'): "&quot;",
    ord("'"): "&#39;",
}

_TEXT_ENTITIES = {
    ord("&"): "&amp;",
    ord("<"): "&lt;",
    ord(">"): "&gt;",
}


def escape_html(s: str) -> str:
    """Escape ``& < > " '`` for text or attribute values."""
    return str(s).translate(_HTML_ENTITIES)


def escape_text(s: str) -> str:
    """Escape only ``& < >``, enough for element content."""
    return str(s).translate(_TEXT_ENTITIES)


def unescape_text(s: str) -> str:
    """Undo one level of entity escaping.

    Exact inverse of :func:`escape_text` on its output, because every ``&``
    left in escaped text starts an entity.
    """
    return html.unescape(s)
