"""App rules, active-window info, and matched identities.

An :class:`AppRule` is a tagged variant: its ``scope`` says whether it targets
one application (by process/window patterns), a whole operating system, or
acts as the universal wildcard fallback.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from keyguide.domain.issues import ConfigIssue
from keyguide.domain.types import (
    DEFAULT_APP_ICON,
    WILDCARD_NAME,
    IssueKind,
    Platform,
    RuleScope,
    Specificity,
    os_display_name,
    os_icon,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppRule:
    """One configured target for shortcut bindings.

    Attributes:
        identity: Display name shown for matches of this rule.
        icon: Display icon.
        scope: ``app``, ``os``, or ``wildcard``.
        process_patterns: Case-insensitive substrings of the process name.
        window_patterns: Case-insensitive substrings of the window title.
        os: Target platform for ``os``-scoped rules.
        position: Index of the configuring entry. Entries that are otherwise
            identical stay distinct rules.
    """

    identity: str
    icon: str = DEFAULT_APP_ICON
    scope: RuleScope = RuleScope.APP
    process_patterns: tuple[str, ...] = ()
    window_patterns: tuple[str, ...] = ()
    os: Platform | None = None
    position: int = 0

    @classmethod
    def app(
        cls,
        identity: str,
        *,
        process: str | tuple[str, ...] | None = None,
        window: str | tuple[str, ...] | None = None,
        icon: str = DEFAULT_APP_ICON,
    ) -> AppRule:
        return cls(
            identity=identity,
            icon=icon,
            scope=RuleScope.APP,
            process_patterns=_as_patterns(process),
            window_patterns=_as_patterns(window),
        )

    @classmethod
    def for_os(cls, platform: Platform, *, icon: str | None = None) -> AppRule:
        return cls(
            identity=os_display_name(platform),
            icon=icon or os_icon(platform),
            scope=RuleScope.OS,
            os=platform,
        )

    @classmethod
    def wildcard(cls, *, icon: str = DEFAULT_APP_ICON) -> AppRule:
        return cls(identity=WILDCARD_NAME, icon=icon, scope=RuleScope.WILDCARD)

    @property
    def is_wildcard(self) -> bool:
        return self.scope is RuleScope.WILDCARD


def _as_patterns(value: str | tuple[str, ...] | None) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = (value,)
    return tuple(p for p in value if p)


@dataclass(frozen=True)
class ActiveWindowInfo:
    """Focused window as reported by the OS collaborator. Both fields optional."""

    process: str | None = None
    window: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.process or "").strip() and not (self.window or "").strip()


@dataclass(frozen=True)
class MatchedAppIdentity:
    """A rule that matched the active window, computed per query."""

    display_name: str
    icon: str
    source_rule: AppRule
    specificity: Specificity

    @classmethod
    def from_rule(cls, rule: AppRule, specificity: Specificity) -> MatchedAppIdentity:
        return cls(
            display_name=rule.identity,
            icon=rule.icon,
            source_rule=rule,
            specificity=specificity,
        )


def dedupe_rules(
    rules: Sequence[AppRule],
    issues: list[ConfigIssue] | None = None,
    locations: Sequence[str] | None = None,
) -> list[AppRule]:
    """Drop later OS rules claiming an already-claimed platform, and extra wildcards.

    The first rule in configuration order wins. Every dropped rule is logged
    and, when *issues* is given, recorded there as ``ambiguous_os_rule``.
    """
    kept: list[AppRule] = []
    claimed_os: set[Platform | None] = set()
    have_wildcard = False
    for index, rule in enumerate(rules):
        location = locations[index] if locations else f"rules[{index}]"
        if rule.scope is RuleScope.OS:
            if rule.os in claimed_os:
                _ambiguous(f"duplicate OS rule for {rule.os}; keeping the first", location, issues)
                continue
            claimed_os.add(rule.os)
        elif rule.scope is RuleScope.WILDCARD:
            if have_wildcard:
                _ambiguous("duplicate wildcard rule; keeping the first", location, issues)
                continue
            have_wildcard = True
        kept.append(rule)
    return kept


def _ambiguous(message: str, location: str, issues: list[ConfigIssue] | None) -> None:
    logger.warning(
        "Ignoring %s: %s", location, message, extra={"issue": IssueKind.AMBIGUOUS_OS_RULE}
    )
    if issues is not None:
        issues.append(
            ConfigIssue(kind=IssueKind.AMBIGUOUS_OS_RULE, message=message, location=location)
        )
