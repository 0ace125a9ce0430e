"""JSON config helpers.

Reads the theme, color, pager, command-pause and key-binding preferences.
All access is defensive: malformed or missing config falls back safely.
Nothing is ever written back.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

APP_NAME = "lazystage"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LOG_DIR = Path(user_log_dir(APP_NAME, appauthor=False))
DEFAULT_DIFF_PAGER = "less -RSX -+F"


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = CONFIG_PATH if path is None else path
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def load_theme_name(config: dict[str, object]) -> str | None:
    """Return the configured UI theme name, ``None`` when unset/invalid."""
    value = config.get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_no_color(config: dict[str, object]) -> bool:
    value = config.get("no_color")
    return value if isinstance(value, bool) else False


def load_diff_pager(config: dict[str, object]) -> str:
    """Return the pager exported as ``GIT_PAGER`` while diffs run."""
    value = config.get("diff_pager")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_DIFF_PAGER


def load_pause_after_command(config: dict[str, object]) -> bool:
    value = config.get("pause_after_command")
    return value if isinstance(value, bool) else True


def load_key_overrides(config: dict[str, object]) -> dict[str, object]:
    """Return the ``keys`` object mapping command names to key tokens.

    Only string command names are kept; token validation happens when the
    keymap is built.
    """
    value = config.get("keys")
    if not isinstance(value, dict):
        return {}
    return {name: keys for name, keys in value.items() if isinstance(name, str)}


@dataclass(frozen=True)
class Settings:
    theme_name: str | None = None
    no_color: bool = False
    diff_pager: str = DEFAULT_DIFF_PAGER
    pause_after_command: bool = True
    key_overrides: dict[str, object] = field(default_factory=dict)


def load_settings(path: Path | None = None) -> Settings:
    config = load_config(path)
    return Settings(
        theme_name=load_theme_name(config),
        no_color=load_no_color(config),
        diff_pager=load_diff_pager(config),
        pause_after_command=load_pause_after_command(config),
        key_overrides=load_key_overrides(config),
    )


__all__ = [
    "APP_NAME",
    "CONFIG_FILENAME",
    "CONFIG_PATH",
    "LOG_DIR",
    "DEFAULT_DIFF_PAGER",
    "Settings",
    "load_config",
    "load_theme_name",
    "load_no_color",
    "load_diff_pager",
    "load_pause_after_command",
    "load_key_overrides",
    "load_settings",
]
