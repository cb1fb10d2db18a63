"""LookupService — the engine's operations wrapped as ServiceResults.

Four read-only surfaces over one configuration snapshot:
- resolve: matched app identities for a window report
- search: candidates ranked by a text query
- keys: candidates ranked by held keys
- normalize: canonical form of a key combination
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from keyguide.domain.bindings import KeyBinding
from keyguide.domain.keys import format_token, is_known_token, normalize_key_combo, sort_tokens
from keyguide.domain.rules import ActiveWindowInfo, AppRule, MatchedAppIdentity
from keyguide.domain.snapshot import ConfigSnapshot
from keyguide.domain.types import WILDCARD_LABEL, IssueKind
from keyguide.services.engine import QueryEngine
from keyguide.services.ranker import ScoredBinding
from keyguide.services.result import ErrorCode, Op, ServiceResult
from keyguide.services.telemetry import traced

logger = logging.getLogger(__name__)


def display_name(rule: AppRule) -> str:
    """Name shown for *rule*; the wildcard reads as a label, not as ``*``."""
    return WILDCARD_LABEL if rule.is_wildcard else rule.identity


def identity_to_dict(identity: MatchedAppIdentity) -> dict[str, Any]:
    return {
        "name": display_name(identity.source_rule),
        "icon": identity.icon,
        "scope": str(identity.source_rule.scope),
        "specificity": identity.specificity.name.lower(),
    }


def binding_to_dict(binding: KeyBinding, score: int | None = None) -> dict[str, Any]:
    rule = binding.owner_rule
    item: dict[str, Any] = {
        "action": binding.action,
        "key": binding.combo.format(),
        "app": display_name(rule),
        "icon": rule.icon,
        "tags": sorted(binding.tags),
        "description": binding.description or "",
    }
    if score is not None:
        item["score"] = score
    return item


class LookupService:
    """Answers lookups against one immutable :class:`ConfigSnapshot`."""

    def __init__(
        self,
        snapshot: ConfigSnapshot,
        *,
        hide_unmatched: bool = False,
        limit: int | None = None,
    ) -> None:
        self._snapshot = snapshot
        self._engine = QueryEngine(snapshot, hide_unmatched=hide_unmatched)
        self._limit = limit

    @property
    def engine(self) -> QueryEngine:
        return self._engine

    def _warnings(self) -> list[str]:
        return [str(issue) for issue in self._snapshot.issues]

    def _apply_limit(self, results: list[ScoredBinding], limit: int | None) -> list[ScoredBinding]:
        limit = limit if limit is not None else self._limit
        return results[:limit] if limit else results

    def _context_data(self, info: ActiveWindowInfo) -> dict[str, Any]:
        return {
            "process": info.process,
            "window": info.window,
            "apps": [display_name(i.source_rule) for i in self._engine.identities],
        }

    # ------------------------------------------------------------------
    # resolve
    # ------------------------------------------------------------------

    @traced
    def resolve(self, info: ActiveWindowInfo) -> ServiceResult:
        """Matched identities for *info*, most specific first."""
        identities = self._engine.resolve(info)
        if not identities:
            logger.debug("No rule matched %r", info, extra={"issue": IssueKind.NO_MATCH})
        return ServiceResult.listing(
            Op.RESOLVE,
            [identity_to_dict(i) for i in identities],
            warnings=self._warnings(),
            process=info.process,
            window=info.window,
        )

    # ------------------------------------------------------------------
    # search (text mode)
    # ------------------------------------------------------------------

    @traced
    def search(
        self,
        info: ActiveWindowInfo,
        query: str = "",
        *,
        limit: int | None = None,
    ) -> ServiceResult:
        """Candidates for *info* ranked by relevance to *query*."""
        self._engine.on_context_change(info)
        results = self._engine.on_text_changed(query)

        results = self._apply_limit(results, limit)
        if not results:
            logger.debug("Search %r returned nothing", query, extra={"issue": IssueKind.NO_MATCH})
        return ServiceResult.listing(
            Op.SEARCH,
            [binding_to_dict(s.binding, s.score) for s in results],
            warnings=self._warnings(),
            query=query,
            **self._context_data(info),
        )

    # ------------------------------------------------------------------
    # keys (key-press mode)
    # ------------------------------------------------------------------

    @traced
    def keys(
        self,
        info: ActiveWindowInfo,
        held_keys: Sequence[str],
        *,
        limit: int | None = None,
    ) -> ServiceResult:
        """Candidates for *info* whose combos contain every held key."""
        platform = self._snapshot.platform
        results = self._engine.on_context_change(info)
        for key in held_keys:
            results = self._engine.on_key_down(key)

        results = self._apply_limit(results, limit)
        held = sort_tokens(self._engine.context.pressed_keys)
        return ServiceResult.listing(
            Op.KEYS,
            [binding_to_dict(s.binding, s.score) for s in results],
            warnings=self._warnings(),
            held=[format_token(t, platform) for t in held],
            **self._context_data(info),
        )

    # ------------------------------------------------------------------
    # normalize
    # ------------------------------------------------------------------

    @traced
    def normalize(self, raw: str) -> ServiceResult:
        """Canonical form of the key combination *raw*."""
        platform = self._snapshot.platform
        combo = normalize_key_combo(raw, platform)
        if not combo.chords:
            return ServiceResult.failure(
                Op.NORMALIZE, ErrorCode.EMPTY_COMBO, "Key combination has no keys", input=raw
            )
        unrecognized = sorted(t for t in combo.tokens() if not is_known_token(t))
        warnings = [
            f"{IssueKind.UNRECOGNIZED_KEY_TOKEN}: {t!r} kept verbatim" for t in unrecognized
        ]
        return ServiceResult(
            ok=True,
            op=Op.NORMALIZE,
            data={
                "input": raw,
                "platform": str(platform),
                "combo": combo.format(),
                "sequence": combo.is_sequence,
                "chords": [list((*c.modifiers, c.key)) for c in combo.chords],
            },
            warnings=warnings,
        )
