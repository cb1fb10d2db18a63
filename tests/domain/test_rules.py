"""Tests for app rules, window info, and rule de-duplication."""

from __future__ import annotations

import pytest

from keyguide.domain.issues import ConfigIssue
from keyguide.domain.rules import ActiveWindowInfo, AppRule, MatchedAppIdentity, dedupe_rules
from keyguide.domain.types import (
    MACOS_ICON,
    WILDCARD_NAME,
    WINDOWS_ICON,
    IssueKind,
    Platform,
    RuleScope,
    Specificity,
)


class TestAppRule:
    def test_app_accepts_single_pattern(self) -> None:
        rule = AppRule.app("VS Code", process="code", window=("Visual Studio Code",))
        assert rule.scope is RuleScope.APP
        assert rule.process_patterns == ("code",)
        assert rule.window_patterns == ("Visual Studio Code",)

    def test_app_drops_empty_patterns(self) -> None:
        rule = AppRule.app("X", process="", window=("", "x"))
        assert rule.process_patterns == ()
        assert rule.window_patterns == ("x",)

    def test_os_rule_defaults(self) -> None:
        win = AppRule.for_os(Platform.WINDOWS)
        mac = AppRule.for_os(Platform.MACOS)
        assert (win.identity, win.icon, win.os) == ("Windows", WINDOWS_ICON, Platform.WINDOWS)
        assert (mac.identity, mac.icon, mac.os) == ("macOS", MACOS_ICON, Platform.MACOS)

    def test_wildcard(self) -> None:
        rule = AppRule.wildcard()
        assert rule.is_wildcard
        assert rule.identity == WILDCARD_NAME

    def test_frozen(self) -> None:
        rule = AppRule.app("X", process="x")
        with pytest.raises(AttributeError):
            rule.identity = "Y"  # type: ignore[misc]


class TestActiveWindowInfo:
    @pytest.mark.parametrize(
        ("process", "window", "empty"),
        [
            (None, None, True),
            ("", "  ", True),
            ("code.exe", None, False),
            (None, "Untitled", False),
        ],
    )
    def test_is_empty(self, process: str | None, window: str | None, empty: bool) -> None:
        assert ActiveWindowInfo(process=process, window=window).is_empty is empty


class TestMatchedAppIdentity:
    def test_from_rule(self) -> None:
        rule = AppRule.app("VS Code", process="code", icon="C")
        identity = MatchedAppIdentity.from_rule(rule, Specificity.PROCESS)
        assert identity.display_name == "VS Code"
        assert identity.icon == "C"
        assert identity.source_rule is rule
        assert identity.specificity is Specificity.PROCESS


class TestDedupeRules:
    def test_first_os_rule_wins(self) -> None:
        first = AppRule.for_os(Platform.WINDOWS, icon="1")
        second = AppRule.for_os(Platform.WINDOWS, icon="2")
        issues: list[ConfigIssue] = []
        kept = dedupe_rules([first, second], issues)
        assert kept == [first]
        assert len(issues) == 1
        assert issues[0].kind is IssueKind.AMBIGUOUS_OS_RULE
        assert issues[0].location == "rules[1]"

    def test_one_os_rule_per_platform(self) -> None:
        rules = [AppRule.for_os(Platform.WINDOWS), AppRule.for_os(Platform.MACOS)]
        assert dedupe_rules(rules) == rules

    def test_duplicate_wildcard_dropped(self) -> None:
        first = AppRule.wildcard(icon="1")
        second = AppRule.wildcard(icon="2")
        issues: list[ConfigIssue] = []
        assert dedupe_rules([first, second], issues, ["a", "b"]) == [first]
        assert issues[0].location == "b"

    def test_app_rules_untouched(self) -> None:
        rules = [AppRule.app("A", process="a"), AppRule.app("A", process="a")]
        assert dedupe_rules(rules) == rules
