"""Root CLI group for keyguide with global flags and command registration."""

from __future__ import annotations

import click

from keyguide import __version__
from keyguide.commands import register_commands
from keyguide.commands._context import AppContext
from keyguide.config.settings import KeyguideSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="keyguide")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--platform",
    type=click.Choice(["windows", "macos"]),
    default=None,
    help="Key conventions to use (default: [core] platform, else the host).",
)
@click.option("--bindings", default=None, help="Keybindings JSON file.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    platform: str | None,
    bindings: str | None,
) -> None:
    """keyguide — context-aware keyboard shortcut lookup."""
    ctx.ensure_object(dict)
    settings = KeyguideSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        platform=platform,
        bindings=bindings,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
