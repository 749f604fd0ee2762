"""String-level conversion between editor HTML and lightweight text.

The editor stores its content as HTML but storage and export work with the
lightweight format. This module converts transparently in both directions.
"""

from __future__ import annotations

import re

from quillmark.dom import tree_from_html
from quillmark.parser import parse
from quillmark.render import render_html
from quillmark.serializer import serialize


def _is_html(text: str) -> bool:
    """Check if text contains HTML tags."""
    return bool(re.search(r"<[a-zA-Z][^>]*>", text))


def html_to_markdown(html: str | None) -> str | None:
    """Convert editor HTML to lightweight text. Plain text passes through unchanged."""
    if html is None:
        return None
    if not html:
        return ""
    if not _is_html(html):
        return html
    return serialize(tree_from_html(html))


def markdown_to_html(md: str | None) -> str | None:
    """Convert lightweight text to preview HTML."""
    if md is None:
        return None
    if not md:
        return ""
    return render_html(parse(md))
