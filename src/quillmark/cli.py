"""CLI entry point for quillmark (qm): editor HTML <-> lightweight text."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from quillmark.config import Settings
    from quillmark.nodes import MarkupNode

import click

from quillmark.config import TREE_FORMATS, load_settings, xdg_config_path
from quillmark.errors import InputError, OutputError, QuillmarkError, output_error
from quillmark.output import emit_event

# ---------------------------------------------------------------------------
# Shared source/output options decorator
# ---------------------------------------------------------------------------


def io_options(f: Callable[..., Any]) -> Callable[..., Any]:
    """Shared decorator that adds a SRC argument and -o/--output to a command."""
    f = click.option("-o", "--output", "output", default=None, help="Write to FILE instead of stdout.")(f)
    return click.argument("src", default="-", required=False)(f)


def _settings() -> Settings:
    """Load settings, letting the global --verbose flag switch diagnostics on."""
    settings = load_settings()
    ctx = click.get_current_context(silent=True)
    if ctx and ctx.obj and ctx.obj.get("verbose"):
        settings.verbose = True
    return settings


def _debug(settings: Settings, event: str, **fields: Any) -> None:
    if settings.verbose:
        emit_event(event, **fields)


def read_source(src: str, encoding: str) -> str:
    """Read SRC (a path, or - for stdin) as text with ``\\n`` line endings."""
    try:
        if src == "-":
            raw = click.get_binary_stream("stdin").read()
        else:
            raw = Path(src).read_bytes()
    except OSError as e:
        raise InputError(f"Cannot read {src}: {e.strerror or e}") from e
    try:
        text = raw.decode(encoding)
    except UnicodeDecodeError as e:
        raise InputError(f"{src} is not valid {encoding}: {e.reason}") from e
    return text.replace("\r\n", "\n").replace("\r", "\n")


def write_result(text: str, output: str | None, encoding: str) -> None:
    """Echo to stdout, or write FILE with ``\\n`` line endings."""
    if output is None:
        click.echo(text)
        return
    try:
        with open(output, "w", encoding=encoding, newline="\n") as f:
            f.write(text + "\n")
    except OSError as e:
        raise OutputError(f"Cannot write {output}: {e.strerror or e}") from e


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option("--verbose", is_flag=True, help="Emit JSON diagnostics to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """quillmark (qm): convert editor HTML to lightweight text and back."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# conversions
# ---------------------------------------------------------------------------


@cli.command("to-text")
@io_options
def to_text(src: str, output: str | None) -> None:
    """Convert editor HTML to lightweight text."""
    from quillmark.markup import html_to_markdown

    try:
        settings = _settings()
        html = read_source(src, settings.encoding)
        text = html_to_markdown(html) or ""
        _debug(settings, "convert", direction="html-to-text", chars_in=len(html), chars_out=len(text))
        write_result(text, output, settings.encoding)
    except QuillmarkError as e:
        output_error(e.error_type, str(e), e.suggestions)


@cli.command("to-html")
@io_options
def to_html(src: str, output: str | None) -> None:
    """Convert lightweight text to preview HTML."""
    from quillmark.markup import markdown_to_html

    try:
        settings = _settings()
        text = read_source(src, settings.encoding)
        html = markdown_to_html(text) or ""
        _debug(settings, "convert", direction="text-to-html", chars_in=len(text), chars_out=len(html))
        write_result(html, output, settings.encoding)
    except QuillmarkError as e:
        output_error(e.error_type, str(e), e.suggestions)


def _load_tree(content: str, source_format: str) -> MarkupNode:
    if source_format == "html":
        from quillmark.dom import tree_from_html

        return tree_from_html(content)
    from quillmark.parser import parse

    return parse(content)


@cli.command()
@io_options
@click.option("--from", "source_format", type=click.Choice(["text", "html"]), default="text", help="Format of SRC.")
@click.option("--format", "fmt", type=click.Choice(list(TREE_FORMATS)), default=None, help="Output format.")
def tree(src: str, output: str | None, source_format: str, fmt: str | None) -> None:
    """Show the markup tree of SRC."""
    from quillmark.output import render

    try:
        settings = _settings()
        tree_root = _load_tree(read_source(src, settings.encoding), source_format)
        _debug(settings, "tree", source=source_format, blocks=len(tree_root.children))
        write_result(render(tree_root, fmt=fmt or settings.tree_format), output, settings.encoding)
    except QuillmarkError as e:
        output_error(e.error_type, str(e), e.suggestions)


@cli.command()
@io_options
def plain(src: str, output: str | None) -> None:
    """Export the visible text of editor HTML."""
    from quillmark.dom import tree_from_html
    from quillmark.render import plain_text

    try:
        settings = _settings()
        text = plain_text(tree_from_html(read_source(src, settings.encoding)))
        write_result(text, output, settings.encoding)
    except QuillmarkError as e:
        output_error(e.error_type, str(e), e.suggestions)


@cli.command("print-view")
@io_options
@click.option("--title", default=None, help="Page title (default from config).")
def print_view_cmd(src: str, output: str | None, title: str | None) -> None:
    """Build a printable HTML page from editor HTML."""
    from quillmark.dom import tree_from_html
    from quillmark.render import plain_text, print_view

    try:
        settings = _settings()
        text = plain_text(tree_from_html(read_source(src, settings.encoding)))
        write_result(print_view(text, title or settings.print_title), output, settings.encoding)
    except QuillmarkError as e:
        output_error(e.error_type, str(e), e.suggestions)


@cli.command()
@click.argument("text", required=False)
def escape(text: str | None) -> None:
    """Escape TEXT (or stdin) for insertion into HTML."""
    from quillmark.escaper import escape_html

    try:
        settings = _settings()
        if text is None:
            text = read_source("-", settings.encoding).rstrip("\n")
        click.echo(escape_html(text))
    except QuillmarkError as e:
        output_error(e.error_type, str(e), e.suggestions)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

_CONFIG_TEMPLATE = """\
# quillmark configuration

# Encoding for input and output files
encoding = "utf-8"

# Default output of `qm tree`: table, json or jsonl
tree_format = "table"

# Title of the page built by `qm print-view`
# print_title = "Print Editor Text"

# Emit JSON diagnostics to stderr
# verbose = true
"""


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite existing config file.")
def init(force: bool) -> None:
    """Create a config file at ~/.config/quillmark/config.toml."""
    target = xdg_config_path()

    if target.exists() and not force:
        click.echo(f"Config already exists: {target}")
        click.echo("Use --force to overwrite.")
        raise SystemExit(1)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(_CONFIG_TEMPLATE)

    click.echo(f"Config written to {target}")
