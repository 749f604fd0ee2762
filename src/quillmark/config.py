"""Configuration: XDG-compliant config discovery and settings."""

from __future__ import annotations

import codecs
import os
import sys
from dataclasses import dataclass
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

from quillmark.errors import ConfigError

_PROJECT_CONFIG = "quillmark.toml"
_APP_DIR = "quillmark"
_XDG_CONFIG = "config.toml"

TREE_FORMATS = ("table", "json", "jsonl")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def find_config() -> Path | None:
    """Discover config file.

    Search order (first existing file wins):
    1. $QM_CONFIG env var (explicit override)
    2. quillmark.toml, walking up from CWD (project-local config)
    3. $XDG_CONFIG_HOME/quillmark/config.toml (default ~/.config/)
    """
    env_path = os.environ.get("QM_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.is_file():
            raise ConfigError(
                f"QM_CONFIG points to missing file: {env_path}",
                suggestions=["Check the path or unset QM_CONFIG to use auto-discovery"],
            )
        return p

    cwd = Path.cwd()
    for d in [cwd, *cwd.parents]:
        candidate = d / _PROJECT_CONFIG
        if candidate.is_file():
            return candidate

    xdg_path = xdg_config_path()
    if xdg_path.is_file():
        return xdg_path

    return None


def xdg_config_path() -> Path:
    """Return the XDG config file path for quillmark."""
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return base / _APP_DIR / _XDG_CONFIG


def load_config_toml(path: Path | None = None) -> dict[str, object]:
    """Load and return raw TOML config dict. Empty dict if no file."""
    if path is None:
        path = find_config()
    if path is None:
        return {}
    try:
        with open(path, "rb") as f:
            result: dict[str, object] = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    return result


@dataclass
class Settings:
    """Conversion and CLI settings."""

    encoding: str = "utf-8"
    tree_format: str = "table"
    print_title: str = "Print Editor Text"
    verbose: bool = False


def _as_bool(name: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(
        f"{name} must be a boolean, got {value!r}",
        suggestions=["Use true or false"],
    )


def _check_encoding(value: str) -> str:
    try:
        codecs.lookup(value)
    except LookupError as e:
        raise ConfigError(
            f"Unknown encoding: {value}",
            suggestions=["Use a Python codec name such as utf-8 or latin-1"],
        ) from e
    return value


def load_settings() -> Settings:
    """Load settings from the config TOML, then apply env var overrides.

    Priority: $QM_* env vars > config TOML > defaults.
    """
    raw = load_config_toml()
    defaults = Settings()

    encoding = os.environ.get("QM_ENCODING") or str(raw.get("encoding", defaults.encoding))
    tree_format = os.environ.get("QM_TREE_FORMAT") or str(raw.get("tree_format", defaults.tree_format))
    if tree_format not in TREE_FORMATS:
        raise ConfigError(
            f"Unknown tree_format: {tree_format}",
            suggestions=[f"Use one of: {', '.join(TREE_FORMATS)}"],
        )
    verbose_raw = os.environ.get("QM_VERBOSE")
    verbose = _as_bool("verbose", verbose_raw if verbose_raw is not None else raw.get("verbose", defaults.verbose))

    return Settings(
        encoding=_check_encoding(encoding),
        tree_format=tree_format,
        print_title=str(raw.get("print_title", defaults.print_title)),
        verbose=verbose,
    )
