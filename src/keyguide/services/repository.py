"""Shortcut repository — candidate bindings for a set of matched identities."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from keyguide.domain.bindings import KeyBinding
from keyguide.domain.rules import AppRule, MatchedAppIdentity


class ShortcutRepository:
    """Bindings grouped by their owning rule.

    Built once per configuration snapshot; read-only afterwards.
    """

    def __init__(self, bindings: Iterable[KeyBinding]) -> None:
        self._by_rule: dict[AppRule, list[KeyBinding]] = {}
        self._wildcard: list[KeyBinding] = []
        for binding in bindings:
            self._by_rule.setdefault(binding.owner_rule, []).append(binding)
            if binding.owner_rule.is_wildcard:
                self._wildcard.append(binding)

    def __len__(self) -> int:
        return sum(len(group) for group in self._by_rule.values())

    def owned_by(self, rule: AppRule) -> list[KeyBinding]:
        return list(self._by_rule.get(rule, ()))

    def candidates_for(self, identities: Sequence[MatchedAppIdentity]) -> list[KeyBinding]:
        """Union of bindings reachable from *identities*, in identity order.

        Wildcard bindings are always included last as the universal
        baseline, whether or not the wildcard identity was matched. A rule
        matched more than once contributes its bindings once; bindings
        configured twice are both kept.
        """
        result: list[KeyBinding] = []
        visited: set[AppRule] = set()
        for identity in identities:
            rule = identity.source_rule
            if rule.is_wildcard or rule in visited:
                continue
            visited.add(rule)
            result.extend(self._by_rule.get(rule, ()))
        result.extend(self._wildcard)
        return result


def candidates_for(
    identities: Sequence[MatchedAppIdentity],
    all_bindings: Iterable[KeyBinding],
) -> list[KeyBinding]:
    """Functional form of :meth:`ShortcutRepository.candidates_for`."""
    return ShortcutRepository(all_bindings).candidates_for(identities)
