"""Tests for keyguide log routing."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from keyguide.config.keybindings import build_snapshot, load_snapshot
from keyguide.config.logging import bind_lookup_context, configure_logging
from keyguide.domain.keys import normalize_key_combo
from keyguide.domain.types import Platform


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    keyguide_level = logging.getLogger("keyguide").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("keyguide").setLevel(keyguide_level)
    structlog.contextvars.clear_contextvars()


def _json_lines(capfd: pytest.CaptureFixture[str]) -> list[dict]:
    return [json.loads(line) for line in capfd.readouterr().err.splitlines() if line]


class TestLevels:
    def test_verbose_opens_keyguide_only(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("keyguide").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_quiet_by_default(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        normalize_key_combo("Ctrl + Hyper", Platform.WINDOWS)
        assert capfd.readouterr().err == ""

    def test_reconfigure_replaces_handler(self) -> None:
        configure_logging(verbose=True)
        configure_logging(log_json=True)
        assert len(logging.getLogger().handlers) == 1


class TestIssueField:
    def test_skipped_entry(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        build_snapshot([{"name": "App", "keybindings": [{"key": "A"}]}], Platform.WINDOWS)
        (event,) = _json_lines(capfd)
        assert event["issue"] == "config_invalid"
        assert event["level"] == "warning"
        assert event["logger"] == "keyguide.config.keybindings"
        assert event["event"].startswith("Skipping entries[0].keybindings[0]:")
        assert "timestamp" in event

    def test_duplicate_os_rule(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        build_snapshot([{"os": "windows"}, {"os": "windows"}], Platform.WINDOWS)
        (event,) = _json_lines(capfd)
        assert event["issue"] == "ambiguous_os_rule"
        assert event["logger"] == "keyguide.domain.rules"

    def test_unrecognized_token_when_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        normalize_key_combo("Ctrl + Hyper", Platform.WINDOWS)
        events = _json_lines(capfd)
        assert [e["issue"] for e in events] == ["unrecognized_key_token"]

    def test_plain_events_have_no_issue(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("keyguide.telemetry").debug("lookup.timed", op="search")
        (event,) = _json_lines(capfd)
        assert event["op"] == "search"
        assert "issue" not in event


class TestLookupContext:
    def test_bound_fields_reach_stdlib_events(
        self, tmp_path: Path, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(log_json=True)
        missing = tmp_path / "keybindings.json"
        bind_lookup_context(platform=Platform.MACOS, bindings=missing)
        load_snapshot(missing, Platform.MACOS)
        (event,) = _json_lines(capfd)
        assert event["platform"] == "macos"
        assert event["bindings"] == str(missing)
        assert event["issue"] == "config_invalid"

    def test_configure_clears_previous_context(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        bind_lookup_context(platform=Platform.WINDOWS, bindings=Path("a.json"))
        configure_logging(log_json=True)
        structlog.get_logger("keyguide.test").warning("after")
        (event,) = _json_lines(capfd)
        assert "platform" not in event

    def test_console_mode_has_no_timestamp(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging()
        structlog.get_logger("keyguide.test").warning("console line")
        err = capfd.readouterr().err
        assert "console line" in err.splitlines()[0]
        assert re.match(r"\d{4}-\d{2}-\d{2}", err) is None
