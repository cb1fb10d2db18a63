"""Shared pytest fixtures and test helpers for keyguide tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from keyguide.config.keybindings import build_snapshot
from keyguide.domain.bindings import KeyBinding
from keyguide.domain.keys import normalize_key_combo
from keyguide.domain.rules import AppRule
from keyguide.domain.snapshot import ConfigSnapshot
from keyguide.domain.types import Platform

SAMPLE_ENTRIES: list[dict[str, Any]] = [
    {
        "name": "VS Code",
        "icon": "C",
        "bind": ["code"],
        "keybindings": [
            {
                "action": "Command Palette",
                "key": {"windows": "Ctrl + Shift + P", "macos": "Cmd + Shift + P"},
                "tags": ["commands"],
            },
            {
                "action": "Save All",
                "key": {"windows": "Ctrl + K → S", "macos": "Cmd + Option + S"},
                "tags": ["file", "save"],
            },
            {"action": "Toggle Terminal", "key": "Ctrl + `", "tags": ["terminal"]},
        ],
    },
    {
        "name": "Notepad",
        "platform": {"windows": {"process": "notepad.exe", "window": "Notepad"}},
        "keybindings": [
            {"action": "Find", "key": "Ctrl + F", "tags": ["search"]},
        ],
    },
    {
        "os": "windows",
        "keybindings": [
            {"action": "Lock Screen", "key": "Win + L", "tags": ["security"]},
            {"action": "Task Manager", "key": "Ctrl + Shift + Esc"},
        ],
    },
    {
        "os": "macos",
        "keybindings": [
            {"action": "Spotlight", "key": "Cmd + Space", "tags": ["search"]},
        ],
    },
    {
        "name": "*",
        "keybindings": [
            {
                "action": "Copy",
                "key": {"windows": "Ctrl + C", "macos": "Cmd + C"},
                "tags": ["clipboard"],
            },
            {
                "action": "Paste",
                "key": {"windows": "Ctrl + V", "macos": "Cmd + V"},
                "tags": ["clipboard"],
            },
            {
                "action": "Undo",
                "key": {"windows": "Ctrl + Z", "macos": "Cmd + Z"},
                "description": "Revert the last edit",
            },
        ],
    },
]


@pytest.fixture(autouse=True)
def user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the per-user config directory at an empty temp folder."""
    path = tmp_path / "user-config"
    monkeypatch.setattr("keyguide.config.discovery.user_config_dir", lambda: path)
    return path


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def windows_snapshot() -> ConfigSnapshot:
    """Sample configuration built for Windows."""
    return build_snapshot(SAMPLE_ENTRIES, Platform.WINDOWS)


@pytest.fixture
def macos_snapshot() -> ConfigSnapshot:
    """Sample configuration built for macOS."""
    return build_snapshot(SAMPLE_ENTRIES, Platform.MACOS)


@pytest.fixture
def bindings_path(tmp_path: Path) -> Path:
    """The sample configuration written to ``keybindings.json``."""
    path = tmp_path / "keybindings.json"
    path.write_text(json.dumps(SAMPLE_ENTRIES), encoding="utf-8")
    return path


@pytest.fixture
def _isolated_project(
    tmp_path: Path,
    bindings_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Change CWD to a temp project pinned to Windows key conventions.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.delenv("KEYGUIDE_CONFIG", raising=False)
    (tmp_path / "keyguide.toml").write_text('[core]\nplatform = "windows"\n', encoding="utf-8")
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_binding(
    action: str,
    key: str,
    rule: AppRule,
    *,
    tags: tuple[str, ...] = (),
    description: str | None = None,
    platform: Platform = Platform.WINDOWS,
) -> KeyBinding:
    """Build a KeyBinding directly, bypassing file validation."""
    return KeyBinding(
        action=action,
        combo=normalize_key_combo(key, platform),
        owner_rule=rule,
        tags=frozenset(tags),
        description=description,
        raw_key=key,
    )
