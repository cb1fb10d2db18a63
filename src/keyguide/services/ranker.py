"""Relevance ranking — text queries and held-key overlap.

Both modes sort stably, so ties keep repository order (app-specific bindings
before OS bindings before wildcard bindings).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from keyguide.domain.bindings import KeyBinding
from keyguide.domain.keys import normalize_key_token
from keyguide.domain.types import Platform

# (exact, prefix, substring) weights per field
_ACTION_WEIGHTS = (100, 70, 50)
_OWNER_WEIGHTS = (80, 60, 40)
_TAG_WEIGHTS = (45, 30, 15)
_DESCRIPTION_WEIGHT = 10

KEY_MATCH_WEIGHT = 10
COMPLETION_BONUS = 50


@dataclass(frozen=True)
class ScoredBinding:
    """A candidate paired with the score that placed it."""

    binding: KeyBinding
    score: int


def _tier(value: str, query: str, weights: tuple[int, int, int]) -> int:
    """Highest applicable tier only: exact, then prefix, then substring."""
    text = value.casefold()
    exact, prefix, substring = weights
    if text == query:
        return exact
    if text.startswith(query):
        return prefix
    if query in text:
        return substring
    return 0


def _prepare_query(query: str | None) -> str:
    return (query or "").strip().casefold()


def text_score(binding: KeyBinding, query: str) -> int:
    """Sum of tiered matches of *query* against one binding.

    Action and owner name contribute their best tier, every tag contributes
    independently, and a description substring adds a flat bonus. The
    wildcard owner never contributes.
    """
    q = _prepare_query(query)
    if not q:
        return 0
    score = _tier(binding.action, q, _ACTION_WEIGHTS)
    if not binding.owner_rule.is_wildcard:
        score += _tier(binding.owner_name, q, _OWNER_WEIGHTS)
    score += sum(_tier(tag, q, _TAG_WEIGHTS) for tag in binding.tags)
    if binding.description and q in binding.description.casefold():
        score += _DESCRIPTION_WEIGHT
    return score


def key_text_matches(binding: KeyBinding, query: str) -> bool:
    """True when *query* appears in the displayed or configured key text."""
    q = _prepare_query(query)
    if not q:
        return False
    return q in binding.combo.format().casefold() or q in binding.raw_key.casefold()


def score_by_text(
    candidates: Sequence[KeyBinding],
    query: str | None,
    *,
    hide_unmatched: bool = False,
) -> list[ScoredBinding]:
    """Scored, ordered candidates for a text query.

    An empty query leaves the candidates in repository order with zero scores.
    With *hide_unmatched*, a binding survives when it scores or when the query
    appears in its key text; key text never adds to the score.
    """
    q = _prepare_query(query)
    if not q:
        return [ScoredBinding(b, 0) for b in candidates]
    scored = [ScoredBinding(b, text_score(b, q)) for b in candidates]
    if hide_unmatched:
        scored = [s for s in scored if s.score > 0 or key_text_matches(s.binding, q)]
    return sorted(scored, key=lambda s: s.score, reverse=True)


def rank_by_text(
    candidates: Sequence[KeyBinding],
    query: str | None,
    *,
    hide_unmatched: bool = False,
) -> list[KeyBinding]:
    """Order *candidates* by text relevance to *query*."""
    return [s.binding for s in score_by_text(candidates, query, hide_unmatched=hide_unmatched)]


def normalize_held_keys(held_keys: Iterable[str], platform: Platform) -> frozenset[str]:
    """Canonical, case-folded tokens for a set of raw held keys."""
    tokens = (normalize_key_token(k, platform) for k in held_keys)
    return frozenset(t.casefold() for t in tokens if t)


def key_score(binding: KeyBinding, held: frozenset[str]) -> int | None:
    """Score a binding against already-normalized held tokens.

    Returns None when some held key is absent from the combo; such bindings
    are excluded rather than ranked low.
    """
    combo_tokens = {t.casefold() for t in binding.combo.tokens()}
    if not held <= combo_tokens:
        return None
    score = KEY_MATCH_WEIGHT * len(held)
    if len(held) == len(combo_tokens):
        score += COMPLETION_BONUS
    return score


def score_by_keys(
    candidates: Sequence[KeyBinding],
    held_keys: Iterable[str],
    platform: Platform,
) -> list[ScoredBinding]:
    """Scored, ordered candidates whose combos contain every held key."""
    held = normalize_held_keys(held_keys, platform)
    if not held:
        return score_by_text(candidates, "")
    scored: list[ScoredBinding] = []
    for binding in candidates:
        score = key_score(binding, held)
        if score is not None:
            scored.append(ScoredBinding(binding, score))
    return sorted(scored, key=lambda s: s.score, reverse=True)


def rank_by_keys(
    candidates: Sequence[KeyBinding],
    held_keys: Iterable[str],
    platform: Platform,
) -> list[KeyBinding]:
    """Order *candidates* by overlap with the currently held keys.

    With no keys held this is the reset state: the full candidate set in
    repository order, exactly as ``rank_by_text(candidates, "")``.
    """
    return [s.binding for s in score_by_keys(candidates, held_keys, platform)]
