"""Platform, rule scope, and specificity enums plus display constants."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Platform(StrEnum):
    """Host platforms with distinct modifier conventions."""

    WINDOWS = "windows"
    MACOS = "macos"


class RuleScope(StrEnum):
    """Which kind of target an app rule describes."""

    APP = "app"
    OS = "os"
    WILDCARD = "wildcard"


class Specificity(IntEnum):
    """How precisely a matched rule targets the observed window.

    Higher values sort first in resolver output.
    """

    WILDCARD = 1
    OS = 2
    WINDOW = 3
    PROCESS = 4
    EXACT_PROCESS = 5


class IssueKind(StrEnum):
    """Locally absorbed problem kinds. None of them is fatal."""

    CONFIG_INVALID = "config_invalid"
    AMBIGUOUS_OS_RULE = "ambiguous_os_rule"
    UNRECOGNIZED_KEY_TOKEN = "unrecognized_key_token"
    NO_MATCH = "no_match"


DEFAULT_APP_ICON = "\U0001f4cc"  # 📌
WINDOWS_ICON = "\U0001fa9f"  # 🪟
MACOS_ICON = "\U0001f34e"  # 🍎

WILDCARD_NAME = "*"
WILDCARD_LABEL = "Common"
UNNAMED_APP = "Unnamed app"

_OS_NAMES: dict[Platform, str] = {
    Platform.WINDOWS: "Windows",
    Platform.MACOS: "macOS",
}
_OS_ICONS: dict[Platform, str] = {
    Platform.WINDOWS: WINDOWS_ICON,
    Platform.MACOS: MACOS_ICON,
}


def os_display_name(platform: Platform) -> str:
    """Display name for an OS-scoped rule."""
    return _OS_NAMES[platform]


def os_icon(platform: Platform) -> str:
    """Default icon for an OS-scoped rule."""
    return _OS_ICONS[platform]
