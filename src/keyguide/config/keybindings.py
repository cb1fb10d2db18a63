"""Keybindings file loading — raw JSON entries to an immutable snapshot.

File format: a JSON list of app entries (or an object with an ``apps`` list)::

    [
      {"name": "VS Code", "icon": "🧑‍💻", "bind": ["code"],
       "keybindings": [{"action": "Copy", "key": "Ctrl + C", "tags": ["copy"]}]},
      {"os": "windows", "keybindings": [...]},
      {"name": "*", "keybindings": [...]}
    ]

``name == "*"`` marks the wildcard rule and ``os`` an OS rule. A key may be a
plain string or a per-platform object ``{"windows": ..., "macos": ...}``; a
key of ``"-"`` or a missing variant means "not available on this platform".

INVARIANT: invalid entries and bindings are skipped with a logged warning,
never fatal to the rest of the file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from keyguide.domain.bindings import KeyBinding
from keyguide.domain.issues import ConfigIssue
from keyguide.domain.keys import normalize_key_combo
from keyguide.domain.rules import AppRule, dedupe_rules
from keyguide.domain.snapshot import ConfigSnapshot
from keyguide.domain.types import (
    DEFAULT_APP_ICON,
    UNNAMED_APP,
    WILDCARD_NAME,
    IssueKind,
    Platform,
)

logger = logging.getLogger(__name__)

UNAVAILABLE_KEY = "-"


# --- Raw file models ---


class PlatformMatch(BaseModel):
    """Per-platform process/window patterns for one app."""

    model_config = {"frozen": True}

    process: str | None = None
    window: str | None = None


class PlatformMatches(BaseModel):
    model_config = {"frozen": True}

    windows: PlatformMatch | None = None
    macos: PlatformMatch | None = None

    def for_platform(self, platform: Platform) -> PlatformMatch | None:
        return self.macos if platform is Platform.MACOS else self.windows


class PlatformKey(BaseModel):
    """Key text that differs between platforms."""

    model_config = {"frozen": True}

    windows: str | None = None
    macos: str | None = None


class KeybindingEntry(BaseModel):
    """One ``keybindings[]`` item."""

    model_config = {"frozen": True}

    action: str
    key: str | PlatformKey
    tags: list[str] = Field(default_factory=list)
    description: str | None = None

    @field_validator("action")
    @classmethod
    def _action_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("action must not be empty")
        return value

    def key_for(self, platform: Platform) -> str | None:
        """Key text for *platform*, or None when unavailable there."""
        if isinstance(self.key, PlatformKey):
            raw = self.key.macos if platform is Platform.MACOS else self.key.windows
        else:
            raw = self.key
        if raw is None or raw.strip() in ("", UNAVAILABLE_KEY):
            return None
        return raw


class AppEntry(BaseModel):
    """One top-level entry: an app, an OS, or the wildcard."""

    model_config = {"frozen": True}

    name: str | None = None
    icon: str | None = None
    bind: str | list[str] | None = None
    process: str | None = None
    window: str | None = None
    platform: PlatformMatches | None = None
    os: Platform | None = None
    keybindings: list[Any] = Field(default_factory=list)

    def to_rule(self, platform: Platform) -> AppRule:
        if (self.name or "").strip() == WILDCARD_NAME:
            return AppRule.wildcard(icon=self.icon or DEFAULT_APP_ICON)
        if self.os is not None:
            return AppRule.for_os(self.os, icon=self.icon)

        name = (self.name or "").strip() or UNNAMED_APP
        process: list[str] = []
        window: list[str] = []
        override = self.platform.for_platform(platform) if self.platform else None
        if override is not None:
            process += [override.process] if override.process else []
            window += [override.window] if override.window else []
        else:
            process += [self.process] if self.process else []
            window += [self.window] if self.window else []
        binds = [self.bind] if isinstance(self.bind, str) else list(self.bind or [])
        for pattern in binds:
            if pattern.strip():
                process.append(pattern.strip())
                window.append(pattern.strip())
        if not process and not window and self.name:
            # Bare named entries match on their own name.
            process = window = [name]
        return AppRule.app(
            name,
            process=tuple(process),
            window=tuple(window),
            icon=self.icon or DEFAULT_APP_ICON,
        )


# --- Snapshot construction ---


def _invalid(issues: list[ConfigIssue], location: str, message: str) -> None:
    logger.warning("Skipping %s: %s", location, message, extra={"issue": IssueKind.CONFIG_INVALID})
    issues.append(ConfigIssue(kind=IssueKind.CONFIG_INVALID, message=message, location=location))


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    err = errors[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else str(err["msg"])


def _build_binding(
    raw: Any,
    rule: AppRule,
    platform: Platform,
    location: str,
    issues: list[ConfigIssue],
) -> KeyBinding | None:
    try:
        entry = KeybindingEntry.model_validate(raw)
    except ValidationError as exc:
        _invalid(issues, location, _first_error(exc))
        return None

    key = entry.key_for(platform)
    if key is None:
        logger.debug("%s: %r has no key on %s", location, entry.action, platform)
        return None

    combo = normalize_key_combo(key, platform)
    if not combo.chords:
        _invalid(issues, location, f"key {key!r} has no keys")
        return None

    tags = frozenset(t.strip() for t in entry.tags if t and t.strip())
    return KeyBinding(
        action=entry.action,
        combo=combo,
        owner_rule=rule,
        tags=tags,
        description=(entry.description or "").strip() or None,
        raw_key=key,
    )


def build_snapshot(entries: list[Any], platform: Platform) -> ConfigSnapshot:
    """Validate raw *entries* and freeze them into a :class:`ConfigSnapshot`."""
    issues: list[ConfigIssue] = []
    rules: list[AppRule] = []
    owned: list[tuple[AppRule, list[Any], str]] = []

    for index, raw in enumerate(entries):
        location = f"entries[{index}]"
        try:
            entry = AppEntry.model_validate(raw)
        except ValidationError as exc:
            _invalid(issues, location, _first_error(exc))
            continue
        rule = replace(entry.to_rule(platform), position=index)
        rules.append(rule)
        owned.append((rule, entry.keybindings, location))

    kept = dedupe_rules(rules, issues, [location for _, _, location in owned])
    kept_ids = {id(rule) for rule in kept}

    bindings: list[KeyBinding] = []
    for rule, raw_bindings, location in owned:
        if id(rule) not in kept_ids:
            continue
        for j, raw in enumerate(raw_bindings):
            binding = _build_binding(raw, rule, platform, f"{location}.keybindings[{j}]", issues)
            if binding is not None:
                bindings.append(binding)

    logger.debug("Snapshot built: %d rules, %d bindings", len(kept), len(bindings))
    return ConfigSnapshot(
        platform=platform,
        rules=tuple(kept),
        bindings=tuple(bindings),
        issues=tuple(issues),
    )


def load_snapshot(path: Path, platform: Platform) -> ConfigSnapshot:
    """Read the keybindings file at *path*.

    A missing or unparsable file yields an empty snapshot carrying a
    ``config_invalid`` issue instead of raising.
    """
    location = str(path)
    if not path.is_file():
        message = "keybindings file not found"
        logger.warning("%s: %s", location, message, extra={"issue": IssueKind.CONFIG_INVALID})
        issue = ConfigIssue(kind=IssueKind.CONFIG_INVALID, message=message, location=location)
        return ConfigSnapshot(platform=platform, issues=(issue,))

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        issues: list[ConfigIssue] = []
        _invalid(issues, location, f"unreadable keybindings file ({exc})")
        return ConfigSnapshot(platform=platform, issues=tuple(issues))

    if isinstance(data, dict):
        data = data.get("apps", [])
    if not isinstance(data, list):
        issues = []
        _invalid(issues, location, "expected a list of app entries")
        return ConfigSnapshot(platform=platform, issues=tuple(issues))

    return build_snapshot(data, platform)
