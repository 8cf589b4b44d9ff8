"""Configuration for a filter session.

Values come from three layers, lowest precedence first: built-in defaults,
the JSON settings file, command-line overrides.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from xfilter.history import DEFAULT_HISTORY_SIZE
from xfilter.text_buffer import DEFAULT_CAPACITY

CONFIG_ENV_VAR = "XFILTER_CONFIG"

# JSON key -> Config field
_SETTINGS_KEYS: dict[str, str] = {
    "items": "items",
    "textCapacity": "text_capacity",
    "historyFile": "history_file",
    "historySize": "history_size",
    "caseInsensitive": "case_insensitive",
    "fileCompletion": "file_completion",
    "grouping": "grouping",
    "password": "password",
    "doubleClickMs": "double_click_ms",
}


class ConfigError(ValueError):
    """Raised for unreadable settings or malformed configuration values."""


@dataclass
class Config:
    """Session configuration."""

    items: int = 10
    text_capacity: int = DEFAULT_CAPACITY
    history_file: str | None = None
    history_size: int = DEFAULT_HISTORY_SIZE
    case_insensitive: bool = False
    file_completion: bool = False
    grouping: bool = False
    password: bool = False
    double_click_ms: int = 250

    def validate(self) -> Config:
        """Check value types and ranges; returns self for chaining."""
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type in ("int", int):
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigError(f"{f.name} must be an integer, got {value!r}")
            elif f.type in ("bool", bool):
                if not isinstance(value, bool):
                    raise ConfigError(f"{f.name} must be true or false, got {value!r}")
            elif value is not None and not isinstance(value, str):
                raise ConfigError(f"{f.name} must be a string, got {value!r}")

        if self.items < 1:
            raise ConfigError(f"items must be at least 1, got {self.items}")
        if self.text_capacity < 1:
            raise ConfigError(f"text_capacity must be at least 1, got {self.text_capacity}")
        if self.history_size < 0:
            raise ConfigError(f"history_size must not be negative, got {self.history_size}")
        if self.double_click_ms < 0:
            raise ConfigError(f"double_click_ms must not be negative, got {self.double_click_ms}")
        return self

    def with_overrides(self, **overrides: Any) -> Config:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def default_settings_path() -> Path:
    """``$XFILTER_CONFIG``, else ``$XDG_CONFIG_HOME/xfilter/settings.json``."""
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return Path(base) / "xfilter" / "settings.json"


def load_settings(path: str | Path, *, required: bool = False) -> dict[str, Any]:
    """Load a JSON settings object.

    A missing file yields no settings unless *required* is set, as it is
    for a path the user named explicitly.
    """
    settings_path = Path(path)
    if not settings_path.exists():
        if required:
            raise ConfigError(f"settings file {settings_path} not found")
        return {}
    try:
        data = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read settings file {settings_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"settings file {settings_path} must contain a JSON object")
    return data


def config_from_settings(settings: dict[str, Any], base: Config | None = None) -> Config:
    """Map camelCase settings keys onto a Config. Unknown keys are rejected."""
    unknown = sorted(set(settings) - set(_SETTINGS_KEYS))
    if unknown:
        raise ConfigError(f"unknown settings: {', '.join(unknown)}")
    overrides = {_SETTINGS_KEYS[key]: value for key, value in settings.items()}
    return (base or Config()).with_overrides(**overrides).validate()


def load_config(path: str | Path | None = None) -> Config:
    if path is None:
        return config_from_settings(load_settings(default_settings_path()))
    return config_from_settings(load_settings(path, required=True))
