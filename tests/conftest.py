"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from quillmark.nodes import (
    MarkupNode,
    bold,
    code,
    code_block,
    document,
    heading,
    italic,
    line_break,
    link,
    list_item,
    ordered_list,
    paragraph,
    unordered_list,
)

# ---------------------------------------------------------------------------
# Sample documents
# ---------------------------------------------------------------------------

SAMPLE_TEXT = """\
## Title

Hello **big** and *small*
see [site](https://x.test) or `x = 1`

- one
- **two**

1. first
2. second

```
if a < b:
    pass
```"""

SAMPLE_HTML = (
    "<h2>Title</h2>"
    "<p>Hello <strong>big</strong> and <em>small</em><br>"
    'see <a href="https://x.test">site</a> or <code>x = 1</code></p>'
    "<ul><li>one</li><li><b>two</b></li></ul>"
    "<ol><li>first</li><li>second</li></ol>"
    "<pre><code>if a &lt; b:\n    pass</code></pre>"
)


def build_sample_tree() -> MarkupNode:
    """The tree SAMPLE_TEXT parses to."""
    return document(
        heading(2, "Title"),
        paragraph(
            "Hello ",
            bold("big"),
            " and ",
            italic("small"),
            line_break(),
            "see ",
            link("https://x.test", "site"),
            " or ",
            code("x = 1"),
        ),
        unordered_list("one", list_item(bold("two"))),
        ordered_list("first", "second"),
        code_block("if a < b:\n    pass"),
    )


@pytest.fixture
def sample_tree() -> MarkupNode:
    return build_sample_tree()


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def sample_html() -> str:
    return SAMPLE_HTML


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep config discovery away from the developer's real files.

    Returns the XDG config home used for the test.
    """
    xdg = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in ("QM_CONFIG", "QM_ENCODING", "QM_TREE_FORMAT", "QM_VERBOSE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return xdg


@pytest.fixture
def runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()
