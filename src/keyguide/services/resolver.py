"""App rule resolution — raw window info to ordered app identities.

Every rule is evaluated independently; all matches are kept and ordered by
specificity (exact process > substring process > window title > OS scope),
configuration order breaking ties. The wildcard rule is appended last as a
fallback, never as a competing match.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from keyguide.domain.rules import ActiveWindowInfo, AppRule, MatchedAppIdentity, dedupe_rules
from keyguide.domain.types import Platform, RuleScope, Specificity

logger = logging.getLogger(__name__)


def _contains(haystack: str | None, patterns: Iterable[str]) -> bool:
    if not haystack:
        return False
    folded = haystack.casefold()
    return any(p and p.casefold() in folded for p in patterns)


def _equals(value: str | None, patterns: Iterable[str]) -> bool:
    if not value:
        return False
    folded = value.strip().casefold()
    return any(p.strip() and p.strip().casefold() == folded for p in patterns)


def rule_specificity(
    rule: AppRule,
    info: ActiveWindowInfo,
    platform: Platform | None = None,
) -> Specificity | None:
    """How precisely *rule* matches *info*, or None when it does not match.

    Absent patterns skip their test rather than counting as a match.
    """
    if rule.scope is RuleScope.WILDCARD:
        return Specificity.WILDCARD
    if rule.scope is RuleScope.OS:
        if platform is not None and rule.os == platform:
            return Specificity.OS
        return None
    if _equals(info.process, rule.process_patterns):
        return Specificity.EXACT_PROCESS
    if _contains(info.process, rule.process_patterns):
        return Specificity.PROCESS
    if _contains(info.window, rule.window_patterns):
        return Specificity.WINDOW
    return None


def resolve_apps(
    info: ActiveWindowInfo | None,
    rules: Sequence[AppRule],
    platform: Platform | None = None,
) -> list[MatchedAppIdentity]:
    """Resolve *info* to every matching identity, most specific first.

    An empty window report (no process and no window title) resolves to the
    wildcard alone, or to nothing when no wildcard is configured.
    """
    info = info or ActiveWindowInfo()
    candidates = dedupe_rules(rules)

    wildcard = next((r for r in candidates if r.is_wildcard), None)
    tail = [MatchedAppIdentity.from_rule(wildcard, Specificity.WILDCARD)] if wildcard else []

    if info.is_empty:
        logger.debug("Empty window info; resolving to fallback only")
        return tail

    matches: list[MatchedAppIdentity] = []
    for rule in candidates:
        if rule.is_wildcard:
            continue
        specificity = rule_specificity(rule, info, platform)
        if specificity is not None:
            matches.append(MatchedAppIdentity.from_rule(rule, specificity))

    # sorted() is stable, so configuration order survives within a tier.
    matches = sorted(matches, key=lambda m: m.specificity, reverse=True)
    logger.debug(
        "Resolved process=%r window=%r to %s",
        info.process,
        info.window,
        [m.display_name for m in matches],
    )
    return matches + tail
