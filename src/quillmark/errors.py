"""Exception hierarchy and structured error output.

The converters themselves never raise; these cover the file and config
handling around them.
"""

from __future__ import annotations

import json
import sys


class QuillmarkError(Exception):
    """Base exception for all quillmark CLI errors."""

    error_type: str = "quillmark_error"
    suggestions: list[str] = []

    def __init__(self, message: str, suggestions: list[str] | None = None) -> None:
        super().__init__(message)
        if suggestions is not None:
            self.suggestions = suggestions


class ConfigError(QuillmarkError):
    """Bad config file or config value."""

    error_type = "config_error"
    suggestions = [
        "Run `qm init --force` to write a fresh config file",
        "Or unset QM_CONFIG to use auto-discovery",
    ]


class InputError(QuillmarkError):
    """Input file missing, unreadable or not decodable."""

    error_type = "input_error"
    suggestions = [
        "Check the path, or pass - to read stdin",
        "Set encoding in the config file if the input is not UTF-8",
    ]


class OutputError(QuillmarkError):
    """Output file could not be written."""

    error_type = "output_error"
    suggestions = ["Check that the target directory exists and is writable"]


def output_error(error_type: str, message: str, suggestions: list[str] | None = None, exit_code: int = 1) -> None:
    """Write a structured error to stderr and exit."""
    err: dict[str, dict[str, str | list[str]]] = {"error": {"type": error_type, "message": message}}
    if suggestions:
        err["error"]["suggestions"] = suggestions
    print(json.dumps(err, ensure_ascii=False), file=sys.stderr)
    sys.exit(exit_code)
