"""Locating ``keyguide.toml`` and the keybindings file.

Lookup order for the settings file:

1. ``KEYGUIDE_CONFIG`` (an explicit file; missing means no config)
2. ``keyguide.toml`` in the start directory or any parent
3. ``keyguide.toml`` in the per-user config directory

A relative keybindings path is tried against the project directory first
and the per-user config directory second, so a personal
``keybindings.json`` works from anywhere.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_FILENAME = "keyguide.toml"
CONFIG_ENV_VAR = "KEYGUIDE_CONFIG"
APP_DIRNAME = "keyguide"


def user_config_dir() -> Path:
    """Per-user configuration directory for keyguide.

    ``%APPDATA%`` on Windows, ``~/Library/Application Support`` on macOS,
    ``$XDG_CONFIG_HOME`` (or ``~/.config``) elsewhere.
    """
    if sys.platform == "win32":
        base = os.environ.get("APPDATA") or str(Path.home() / "AppData" / "Roaming")
    elif sys.platform == "darwin":
        base = str(Path.home() / "Library" / "Application Support")
    else:
        base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / APP_DIRNAME


def _walk_up(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_config(start: Path | None = None) -> Path | None:
    """The settings file in effect for *start* (default: cwd), or None."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        explicit = Path(env_path).expanduser()
        return explicit if explicit.is_file() else None

    found = _walk_up((start or Path.cwd()).resolve())
    if found is not None:
        return found

    personal = user_config_dir() / CONFIG_FILENAME
    return personal if personal.is_file() else None


def resolve_bindings_path(configured: str, base_dir: Path) -> Path:
    """Where to read *configured* from.

    Absolute paths are used as given. A relative path resolves against
    *base_dir*, falling back to the per-user config directory when only
    that copy exists. When neither exists the project location is
    returned so the "not found" issue names the expected file.
    """
    path = Path(configured).expanduser()
    if path.is_absolute():
        return path
    project = base_dir / path
    if project.is_file():
        return project
    personal = user_config_dir() / path
    return personal if personal.is_file() else project
