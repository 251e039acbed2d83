"""Configuration: defaults and config loading (global file, env override, CLI --config)."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "config.json"
# Environment variable naming an alternate config file
CONFIG_ENV_VAR = "STDINOUT_CONFIG"


def _global_config_dir() -> Path:
    return Path.home() / ".stdinout"


def global_config_path() -> Path:
    """Path to global config file (~/.stdinout/config.json), or $STDINOUT_CONFIG when set."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return _global_config_dir() / CONFIG_FILENAME


def default_config() -> dict[str, Any]:
    """Default configuration used when no config file exists."""
    return {
        "dash_is_stdio": True,
        "chunk_size": 65536,
        "logging": {
            "level": "WARNING",
            "file": None,
        },
    }


def _load_json(path: Path) -> dict[str, Any] | None:
    """Load JSON object from path; return None if file missing or invalid."""
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (json.JSONDecodeError, OSError):
        return None
    return data if isinstance(data, dict) else None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base recursively. Mutates base; returns base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: Path | None = None) -> dict[str, Any]:
    """
    Load merged configuration: defaults + config file.

    If path is None, the global config (global_config_path()) is used. A missing or
    unparseable file leaves the defaults untouched.
    """
    target = Path(path).expanduser() if path is not None else global_config_path()
    data = _load_json(target)
    if data is None:
        return default_config()
    return _deep_merge(default_config(), data)
