"""Key-combination normalization.

Canonical form: every chord is a tuple of modifier tokens in fixed order
(``primary``, ``super``, ``alt``, ``shift``) followed by exactly one base key.
Sequences are chords entered one after another, written with ``→``.

Modifier spellings differ per platform. On Windows the primary modifier is
Ctrl and the super key is Win; on macOS the primary modifier is Cmd and the
remaining Control key takes the super slot. The platform is always passed
in explicitly.

The same tables apply to held keys, so a held Control means ``primary`` on
Windows but ``super`` on macOS, where Cmd is the ``primary`` key.

Unrecognized tokens pass through verbatim so partial or custom config data
still compares instead of failing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from keyguide.domain.types import IssueKind, Platform

logger = logging.getLogger(__name__)

PRIMARY = "primary"
SUPER = "super"
ALT = "alt"
SHIFT = "shift"

MODIFIER_ORDER: tuple[str, ...] = (PRIMARY, SUPER, ALT, SHIFT)

CHORD_SEPARATOR = " + "
SEQUENCE_SEPARATOR = " → "

_SEQUENCE_SPLIT = re.compile(r"\s*→\s*|\s+->\s+")
# A "+" only separates when something follows it, so "Ctrl++" keeps its "+" key.
_CHORD_SPLIT = re.compile(r"\s*\+\s*(?=\S)")
_FUNCTION_KEY = re.compile(r"^f([1-9]|1[0-9]|2[0-4])$")

_COMMON_ALIASES: dict[str, str] = {
    "primary": PRIMARY,
    "mod": PRIMARY,
    "cmdorctrl": PRIMARY,
    "cmdorcontrol": PRIMARY,
    "commandorcontrol": PRIMARY,
    "commandorctrl": PRIMARY,
    "super": SUPER,
    "alt": ALT,
    "altleft": ALT,
    "altright": ALT,
    "lalt": ALT,
    "ralt": ALT,
    "alt_l": ALT,
    "alt_r": ALT,
    "option": ALT,
    "opt": ALT,
    "⌥": ALT,
    "shift": SHIFT,
    "shiftleft": SHIFT,
    "shiftright": SHIFT,
    "lshift": SHIFT,
    "rshift": SHIFT,
    "shift_l": SHIFT,
    "shift_r": SHIFT,
    "⇧": SHIFT,
}

_CONTROL_SPELLINGS = (
    "ctrl",
    "control",
    "controlleft",
    "controlright",
    "lctrl",
    "rctrl",
    "ctrl_l",
    "ctrl_r",
    "⌃",
)
_COMMAND_SPELLINGS = ("cmd", "command", "lcmd", "rcmd", "⌘")
_META_SPELLINGS = ("meta", "metaleft", "metaright")
_WINDOWS_KEY_SPELLINGS = ("win", "windows", "lwin", "rwin", "os", "super_l", "super_r")

_PLATFORM_ALIASES: dict[Platform, dict[str, str]] = {
    Platform.WINDOWS: {
        **dict.fromkeys(_CONTROL_SPELLINGS, PRIMARY),
        # A mac-spelled command key means the primary modifier here.
        **dict.fromkeys(_COMMAND_SPELLINGS, PRIMARY),
        **dict.fromkeys(_META_SPELLINGS, SUPER),
        **dict.fromkeys(_WINDOWS_KEY_SPELLINGS, SUPER),
    },
    Platform.MACOS: {
        **dict.fromkeys(_COMMAND_SPELLINGS, PRIMARY),
        **dict.fromkeys(_META_SPELLINGS, PRIMARY),
        **dict.fromkeys(_CONTROL_SPELLINGS, SUPER),
    },
}

_MODIFIER_LABELS: dict[Platform, dict[str, str]] = {
    Platform.WINDOWS: {PRIMARY: "Ctrl", SUPER: "Win", ALT: "Alt", SHIFT: "Shift"},
    Platform.MACOS: {PRIMARY: "Cmd", SUPER: "Ctrl", ALT: "Option", SHIFT: "Shift"},
}

_NAMED_KEYS: dict[str, str] = {
    "up": "Up",
    "arrowup": "Up",
    "↑": "Up",
    "down": "Down",
    "arrowdown": "Down",
    "↓": "Down",
    "left": "Left",
    "arrowleft": "Left",
    "←": "Left",
    "right": "Right",
    "arrowright": "Right",
    "esc": "Esc",
    "escape": "Esc",
    "enter": "Enter",
    "return": "Enter",
    "↵": "Enter",
    "⏎": "Enter",
    "space": "Space",
    "spacebar": "Space",
    "tab": "Tab",
    "⇥": "Tab",
    "backspace": "Backspace",
    "bksp": "Backspace",
    "⌫": "Backspace",
    "delete": "Delete",
    "del": "Delete",
    "⌦": "Delete",
    "home": "Home",
    "end": "End",
    "pageup": "PageUp",
    "pgup": "PageUp",
    "pagedown": "PageDown",
    "pgdn": "PageDown",
    "insert": "Insert",
    "ins": "Insert",
    "capslock": "CapsLock",
    "printscreen": "PrintScreen",
    "prtsc": "PrintScreen",
    "plus": "+",
}


@dataclass(frozen=True)
class Chord:
    """Keys pressed together: ordered modifiers plus one base key."""

    modifiers: tuple[str, ...]
    key: str

    def tokens(self) -> frozenset[str]:
        return frozenset((*self.modifiers, self.key))

    def format(self, platform: Platform) -> str:
        parts = [format_token(t, platform) for t in (*self.modifiers, self.key)]
        return CHORD_SEPARATOR.join(parts)


@dataclass(frozen=True)
class NormalizedKeyCombo:
    """A canonical key combination: one chord, or a sequence of chords."""

    platform: Platform
    chords: tuple[Chord, ...] = ()

    @property
    def is_sequence(self) -> bool:
        return len(self.chords) > 1

    def tokens(self) -> frozenset[str]:
        """Unique tokens across every step of the combo."""
        result: set[str] = set()
        for chord in self.chords:
            result |= chord.tokens()
        return frozenset(result)

    def format(self) -> str:
        return SEQUENCE_SEPARATOR.join(c.format(self.platform) for c in self.chords)

    def __str__(self) -> str:
        return self.format()


def is_modifier(token: str) -> bool:
    return token in MODIFIER_ORDER


def is_known_token(token: str) -> bool:
    """True for canonical tokens; False for ones passed through verbatim."""
    return (
        is_modifier(token)
        or token in _NAMED_KEYS.values()
        or bool(_FUNCTION_KEY.match(token.lower()))
        or len(token) == 1
    )


def sort_tokens(tokens: Iterable[str]) -> list[str]:
    """Canonical display order: modifiers first, then other keys alphabetically."""
    rank = {m: i for i, m in enumerate(MODIFIER_ORDER)}
    return sorted(tokens, key=lambda t: (rank.get(t, len(rank)), t))


def format_token(token: str, platform: Platform) -> str:
    """Display label for a canonical token on *platform*."""
    return _MODIFIER_LABELS[platform].get(token, token)


def normalize_key_token(raw: str, platform: Platform) -> str:
    """Canonicalize a single key token (e.g. a held key reported by the UI).

    Examples:
        >>> normalize_key_token("Control", Platform.WINDOWS)
        'primary'
        >>> normalize_key_token("Meta", Platform.MACOS)
        'primary'
        >>> normalize_key_token("c", Platform.WINDOWS)
        'C'
        >>> normalize_key_token("ArrowUp", Platform.MACOS)
        'Up'
    """
    if raw == " ":
        return "Space"
    token = raw.strip()
    if not token:
        return token

    folded = token.lower()
    alias = _PLATFORM_ALIASES[platform].get(folded) or _COMMON_ALIASES.get(folded)
    if alias is not None:
        return alias

    compact = folded.replace(" ", "")
    named = _NAMED_KEYS.get(compact)
    if named is not None:
        return named
    if _FUNCTION_KEY.match(compact):
        return compact.upper()

    if len(token) == 1:
        return token.upper()

    logger.debug(
        "Unrecognized key token passed through: %r",
        token,
        extra={"issue": IssueKind.UNRECOGNIZED_KEY_TOKEN},
    )
    return token


def _build_chord(tokens: list[str]) -> Chord:
    non_modifiers = [t for t in tokens if not is_modifier(t)]
    present = {t for t in tokens if is_modifier(t)}
    if non_modifiers:
        key = non_modifiers[-1]
        extras = sorted(set(non_modifiers[:-1]) - {key})
    else:
        # Modifier-only chord: the last modifier in canonical order is the base.
        key = next(m for m in reversed(MODIFIER_ORDER) if m in present)
        present.discard(key)
        extras = []
    ordered = tuple(m for m in MODIFIER_ORDER if m in present and m != key)
    return Chord(modifiers=ordered + tuple(extras), key=key)


def normalize_key_combo(raw: str | NormalizedKeyCombo, platform: Platform) -> NormalizedKeyCombo:
    """Canonicalize a textual key combination for *platform*.

    Splits on the sequence delimiter first, then on ``+`` within each step.
    Idempotent: normalizing an already normalized combo (or its rendered
    text) yields an identical result.

    Examples:
        >>> str(normalize_key_combo("shift+ctrl+p", Platform.WINDOWS))
        'Ctrl + Shift + P'
        >>> str(normalize_key_combo("Cmd+K → Cmd+S", Platform.MACOS))
        'Cmd + K → Cmd + S'
    """
    if isinstance(raw, NormalizedKeyCombo):
        if raw.platform == platform:
            return raw
        raw = raw.format()

    chords: list[Chord] = []
    for step in _SEQUENCE_SPLIT.split(raw.strip()):
        tokens = [normalize_key_token(part, platform) for part in _CHORD_SPLIT.split(step.strip())]
        tokens = [t for t in tokens if t]
        if tokens:
            chords.append(_build_chord(tokens))
    return NormalizedKeyCombo(platform=platform, chords=tuple(chords))
