"""Key bindings and the per-interaction query context."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from keyguide.domain.keys import NormalizedKeyCombo
from keyguide.domain.rules import ActiveWindowInfo, AppRule


@dataclass(frozen=True)
class KeyBinding:
    """A configured shortcut owned by exactly one rule.

    ``raw_key`` keeps the configured text for display; comparisons always
    use ``combo``.
    """

    action: str
    combo: NormalizedKeyCombo
    owner_rule: AppRule
    tags: frozenset[str] = frozenset()
    description: str | None = None
    raw_key: str = ""

    @property
    def owner_name(self) -> str:
        return self.owner_rule.identity


class QueryMode(StrEnum):
    TEXT = "text"
    KEYS = "keys"


@dataclass(frozen=True)
class QueryContext:
    """Ephemeral input for one interaction cycle.

    Held keys take precedence: while any key is down the context ranks by
    key overlap, otherwise by the text query.
    """

    active_window: ActiveWindowInfo = field(default_factory=ActiveWindowInfo)
    pressed_keys: frozenset[str] = frozenset()
    text_query: str = ""

    @property
    def mode(self) -> QueryMode:
        return QueryMode.KEYS if self.pressed_keys else QueryMode.TEXT
