"""Tests for app rule resolution."""

from __future__ import annotations

from keyguide.domain.rules import ActiveWindowInfo, AppRule
from keyguide.domain.types import Platform, Specificity
from keyguide.services.resolver import resolve_apps, rule_specificity


def _names(identities: list) -> list[str]:
    return [i.display_name for i in identities]


class TestRuleSpecificity:
    def test_exact_process(self) -> None:
        rule = AppRule.app("Code", process="code.exe")
        info = ActiveWindowInfo(process="Code.exe")
        assert rule_specificity(rule, info) is Specificity.EXACT_PROCESS

    def test_substring_process(self) -> None:
        rule = AppRule.app("Code", process="code")
        info = ActiveWindowInfo(process="Code.exe")
        assert rule_specificity(rule, info) is Specificity.PROCESS

    def test_window_title(self) -> None:
        rule = AppRule.app("Code", window="visual studio code")
        info = ActiveWindowInfo(window="main.py - Visual Studio Code")
        assert rule_specificity(rule, info) is Specificity.WINDOW

    def test_absent_field_skips_test(self) -> None:
        rule = AppRule.app("Code", process="code")
        assert rule_specificity(rule, ActiveWindowInfo(window="code")) is None

    def test_rule_without_patterns_never_matches(self) -> None:
        rule = AppRule.app("Nothing")
        assert rule_specificity(rule, ActiveWindowInfo(process="x", window="y")) is None

    def test_os_rule_needs_platform(self) -> None:
        rule = AppRule.for_os(Platform.WINDOWS)
        info = ActiveWindowInfo(process="explorer.exe")
        assert rule_specificity(rule, info) is None
        assert rule_specificity(rule, info, Platform.MACOS) is None
        assert rule_specificity(rule, info, Platform.WINDOWS) is Specificity.OS


class TestResolveApps:
    def test_app_then_wildcard(self) -> None:
        code = AppRule.app("Code", process="Code")
        rules = [code, AppRule.wildcard()]
        result = resolve_apps(ActiveWindowInfo(process="Code"), rules)
        assert [i.source_rule for i in result] == [code, rules[1]]
        assert result[-1].specificity is Specificity.WILDCARD

    def test_specificity_order(self) -> None:
        rules = [
            AppRule.wildcard(),
            AppRule.for_os(Platform.WINDOWS),
            AppRule.app("By Window", window="visual studio code"),
            AppRule.app("By Substring", process="code"),
            AppRule.app("By Exact", process="code.exe"),
        ]
        info = ActiveWindowInfo(process="Code.exe", window="main.py - Visual Studio Code")
        result = resolve_apps(info, rules, Platform.WINDOWS)
        assert _names(result) == ["By Exact", "By Substring", "By Window", "Windows", "*"]

    def test_ties_keep_configuration_order(self) -> None:
        rules = [
            AppRule.app("First", process="code"),
            AppRule.app("Second", process="cod"),
        ]
        result = resolve_apps(ActiveWindowInfo(process="code.exe"), rules)
        assert _names(result) == ["First", "Second"]

    def test_case_insensitive(self) -> None:
        rules = [AppRule.app("Chrome", process="CHROME")]
        assert _names(resolve_apps(ActiveWindowInfo(process="chrome.exe"), rules)) == ["Chrome"]

    def test_no_match_falls_back_to_wildcard(self) -> None:
        rules = [AppRule.app("Code", process="code"), AppRule.wildcard()]
        assert _names(resolve_apps(ActiveWindowInfo(process="excel.exe"), rules)) == ["*"]

    def test_no_match_without_wildcard_is_empty(self) -> None:
        rules = [AppRule.app("Code", process="code")]
        assert resolve_apps(ActiveWindowInfo(process="excel.exe"), rules) == []

    def test_empty_info_resolves_to_wildcard_only(self) -> None:
        rules = [AppRule.for_os(Platform.WINDOWS), AppRule.wildcard()]
        assert _names(resolve_apps(ActiveWindowInfo(), rules, Platform.WINDOWS)) == ["*"]
        assert _names(resolve_apps(None, rules, Platform.WINDOWS)) == ["*"]

    def test_empty_info_without_wildcard(self) -> None:
        assert resolve_apps(ActiveWindowInfo(), [AppRule.app("A", process="a")]) == []

    def test_wildcard_is_last_regardless_of_position(self) -> None:
        rules = [AppRule.wildcard(), AppRule.app("Code", process="code")]
        assert _names(resolve_apps(ActiveWindowInfo(process="code"), rules)) == ["Code", "*"]

    def test_duplicate_os_rule_first_wins(self) -> None:
        rules = [
            AppRule.for_os(Platform.WINDOWS, icon="first"),
            AppRule.for_os(Platform.WINDOWS, icon="second"),
        ]
        result = resolve_apps(ActiveWindowInfo(process="x"), rules, Platform.WINDOWS)
        assert [i.icon for i in result] == ["first"]

    def test_one_rule_matches_once(self) -> None:
        rule = AppRule.app("Code", process="code", window="code")
        info = ActiveWindowInfo(process="code", window="code")
        result = resolve_apps(info, [rule])
        assert len(result) == 1
        assert result[0].specificity is Specificity.EXACT_PROCESS

    def test_sample_configuration(self, windows_snapshot) -> None:
        info = ActiveWindowInfo(process="Code.exe", window="main.py - Visual Studio Code")
        result = resolve_apps(info, windows_snapshot.rules, Platform.WINDOWS)
        assert _names(result) == ["VS Code", "Windows", "*"]
