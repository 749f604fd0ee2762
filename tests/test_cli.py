"""Tests for the conversion commands."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from quillmark.cli import cli


class TestToText:
    def test_stdin(self, runner: CliRunner, sample_html: str, sample_text: str) -> None:
        result = runner.invoke(cli, ["to-text"], input=sample_html)
        assert result.exit_code == 0
        assert result.output == sample_text + "\n"

    def test_file_to_file(self, runner: CliRunner, tmp_path: Path) -> None:
        src = tmp_path / "in.html"
        src.write_text("<h1>T</h1><p>x</p>")
        out = tmp_path / "out.md"
        result = runner.invoke(cli, ["to-text", str(src), "-o", str(out)])
        assert result.exit_code == 0
        assert result.output == ""
        assert out.read_bytes() == b"# T\n\nx\n"

    def test_plain_text_passthrough(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["to-text", "-"], input="no tags here")
        assert result.output == "no tags here\n"


class TestToHtml:
    def test_stdin(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["to-html"], input="# T\n\n**b**")
        assert result.exit_code == 0
        assert result.output == "<h1>T</h1>\n<p><strong>b</strong></p>\n"

    def test_crlf_input(self, runner: CliRunner, tmp_path: Path) -> None:
        src = tmp_path / "in.md"
        src.write_bytes(b"a\r\nb\r\n\r\nc")
        result = runner.invoke(cli, ["to-html", str(src)])
        assert result.output == "<p>a<br>b</p>\n<p>c</p>\n"

    def test_encoding_from_config(self, runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "quillmark.toml").write_text('encoding = "latin-1"\n')
        src = tmp_path / "in.md"
        src.write_bytes("café".encode("latin-1"))
        out = tmp_path / "out.html"
        result = runner.invoke(cli, ["to-html", str(src), "-o", str(out)])
        assert result.exit_code == 0
        assert out.read_bytes() == "<p>café</p>\n".encode("latin-1")


class TestTree:
    def test_json(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["tree", "--format", "json"], input="# A\n\n- x")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [c["kind"] for c in data["children"]] == ["heading", "unordered_list"]

    def test_jsonl_from_html(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["tree", "--from", "html", "--format", "jsonl"], input="<p>a</p><pre>b</pre>")
        lines = result.output.strip().split("\n")
        assert [json.loads(line)["kind"] for line in lines] == ["paragraph", "code_block"]

    def test_default_table(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["tree"], input="# A\n\n[x](y)")
        assert result.exit_code == 0
        assert "heading" in result.output
        assert "[x](y)" in result.output

    def test_format_from_config(self, runner: CliRunner, monkeypatch) -> None:  # type: ignore[no-untyped-def]
        monkeypatch.setenv("QM_TREE_FORMAT", "json")
        result = runner.invoke(cli, ["tree"], input="a")
        assert json.loads(result.output)["children"][0]["kind"] == "paragraph"


class TestPlainAndPrint:
    def test_plain(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["plain"], input="<h1>T</h1><p>a<br>b</p>")
        assert result.output == "T\na\nb\n"

    def test_print_view(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["print-view", "--title", "Mine"], input="<p>a &lt; b</p>")
        assert result.exit_code == 0
        assert "<title>Mine</title>" in result.output
        assert "a &lt; b</pre>" in result.output

    def test_print_view_title_from_config(self, runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "quillmark.toml").write_text('print_title = "Notes"\n')
        result = runner.invoke(cli, ["print-view"], input="<p>x</p>")
        assert "<title>Notes</title>" in result.output


class TestEscape:
    def test_argument(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["escape", "<a href='x'>"])
        assert result.output == "&lt;a href=&#39;x&#39;&gt;\n"

    def test_stdin(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["escape"], input="a & b\n")
        assert result.output == "a &amp; b\n"


class TestVerbose:
    def test_flag_emits_event(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--verbose", "to-html"], input="x")
        assert result.exit_code == 0
        events = [json.loads(line) for line in result.output.splitlines() if line.startswith('{"event"')]
        assert events == [{"event": "convert", "direction": "text-to-html", "chars_in": 1, "chars_out": 8}]

    def test_quiet_by_default(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["to-html"], input="x")
        assert '"event"' not in result.output
