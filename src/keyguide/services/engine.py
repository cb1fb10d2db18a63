"""QueryEngine — per-interaction orchestration of resolve, build, and rank.

Two triggers drive it:

- context change (a new active-window report): resolve identities, rebuild
  the candidate set, clear held keys and text, re-rank with empty input;
- input delta (text edited, key pressed or released): re-rank the existing
  candidate set only.

Text and held keys are exclusive inputs. Pressing a key discards the text
query and editing the text releases every key, so releasing the last key
always lands in the reset state: all candidates, unscored, in repository
order.

The configuration snapshot is immutable. A live edit installs a whole new
snapshot through :meth:`QueryEngine.swap_snapshot` between cycles.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from keyguide.domain.bindings import KeyBinding, QueryContext, QueryMode
from keyguide.domain.keys import normalize_key_token
from keyguide.domain.rules import ActiveWindowInfo, MatchedAppIdentity
from keyguide.domain.snapshot import ConfigSnapshot
from keyguide.services.ranker import ScoredBinding, score_by_keys, score_by_text
from keyguide.services.repository import ShortcutRepository
from keyguide.services.resolver import resolve_apps
from keyguide.services.telemetry import Stage, stage

logger = logging.getLogger(__name__)


class QueryEngine:
    """Stateful driver over pure resolve/build/query operations.

    Usage::

        engine = QueryEngine(snapshot)
        engine.on_context_change(ActiveWindowInfo(process="Code.exe"))
        results = engine.on_text_changed("copy")
    """

    def __init__(self, snapshot: ConfigSnapshot, *, hide_unmatched: bool = False) -> None:
        self._snapshot = snapshot
        self._repository = ShortcutRepository(snapshot.bindings)
        self._hide_unmatched = hide_unmatched
        self._context = QueryContext()
        self._identities: list[MatchedAppIdentity] = []
        self._candidates: list[KeyBinding] = []
        self._results: list[ScoredBinding] = []

    # ------------------------------------------------------------------
    # Pure operations
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> ConfigSnapshot:
        return self._snapshot

    def resolve(self, window_info: ActiveWindowInfo | None) -> list[MatchedAppIdentity]:
        with stage(Stage.RESOLVE) as span:
            identities = resolve_apps(window_info, self._snapshot.rules, self._snapshot.platform)
            if span:
                span.record(identities=len(identities))
        return identities

    def build_candidates(self, identities: Sequence[MatchedAppIdentity]) -> list[KeyBinding]:
        with stage(Stage.BUILD) as span:
            candidates = self._repository.candidates_for(identities)
            if span:
                span.record(candidates=len(candidates))
        return candidates

    def score(self, candidates: Sequence[KeyBinding], context: QueryContext) -> list[ScoredBinding]:
        """Rank *candidates* for *context*, keeping the scores."""
        with stage(Stage.RANK) as span:
            if context.mode is QueryMode.KEYS:
                results = score_by_keys(candidates, context.pressed_keys, self._snapshot.platform)
            else:
                results = score_by_text(
                    candidates, context.text_query, hide_unmatched=self._hide_unmatched
                )
            if span:
                span.record(mode=str(context.mode), results=len(results))
        return results

    def query(self, candidates: Sequence[KeyBinding], context: QueryContext) -> list[KeyBinding]:
        return [s.binding for s in self.score(candidates, context)]

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    @property
    def context(self) -> QueryContext:
        return self._context

    @property
    def identities(self) -> list[MatchedAppIdentity]:
        return list(self._identities)

    @property
    def candidates(self) -> list[KeyBinding]:
        return list(self._candidates)

    @property
    def results(self) -> list[ScoredBinding]:
        return list(self._results)

    def on_context_change(self, window_info: ActiveWindowInfo | None) -> list[ScoredBinding]:
        """Handle a new active-window report. Later reports supersede earlier ones."""
        info = window_info or ActiveWindowInfo()
        self._identities = self.resolve(info)
        self._candidates = self.build_candidates(self._identities)
        self._context = QueryContext(active_window=info)
        logger.debug(
            "Context changed: %d identities, %d candidates",
            len(self._identities),
            len(self._candidates),
        )
        return self._rerank()

    def on_text_changed(self, text: str) -> list[ScoredBinding]:
        """Replace the text query; any held keys are released."""
        self._context = QueryContext(active_window=self._context.active_window, text_query=text)
        return self._rerank()

    def on_key_down(self, token: str) -> list[ScoredBinding]:
        key = normalize_key_token(token, self._snapshot.platform)
        if not key:
            return self.results
        return self._set_keys(self._context.pressed_keys | {key})

    def on_key_up(self, token: str) -> list[ScoredBinding]:
        key = normalize_key_token(token, self._snapshot.platform)
        if key not in self._context.pressed_keys:
            return self.results
        return self._set_keys(self._context.pressed_keys - {key})

    def release_all(self) -> list[ScoredBinding]:
        """Back to the reset state, dropping held keys and text alike."""
        return self._set_keys(frozenset())

    def swap_snapshot(self, snapshot: ConfigSnapshot) -> list[ScoredBinding]:
        """Install a new configuration snapshot and re-resolve the current window."""
        self._snapshot = snapshot
        self._repository = ShortcutRepository(snapshot.bindings)
        return self.on_context_change(self._context.active_window)

    def _set_keys(self, keys: frozenset[str]) -> list[ScoredBinding]:
        self._context = QueryContext(active_window=self._context.active_window, pressed_keys=keys)
        return self._rerank()

    def _rerank(self) -> list[ScoredBinding]:
        self._results = self.score(self._candidates, self._context)
        return self.results
