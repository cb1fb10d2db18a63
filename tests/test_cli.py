"""Tests for the root keyguide CLI."""

from click.testing import CliRunner

from keyguide import __version__
from keyguide.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "keyguide" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


def test_json_flag_accepted(cli_runner: CliRunner) -> None:
    assert cli_runner.invoke(cli, ["--json", "--version"]).exit_code == 0


def test_quiet_flag_accepted(cli_runner: CliRunner) -> None:
    assert cli_runner.invoke(cli, ["-q", "--version"]).exit_code == 0


def test_verbose_flag_accepted(cli_runner: CliRunner) -> None:
    assert cli_runner.invoke(cli, ["-v", "--version"]).exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner) -> None:
    assert cli_runner.invoke(cli, ["-c", "/tmp/test.toml", "--version"]).exit_code == 0


def test_platform_choice_validated(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--platform", "linux", "normalize", "a"])
    assert result.exit_code == 2


# --- Commands registered ---

EXPECTED_COMMANDS = ["resolve", "search", "keys", "normalize"]


def test_all_commands_registered() -> None:
    assert sorted(cli.commands) == sorted(EXPECTED_COMMANDS)
