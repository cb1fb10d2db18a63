"""Subcommand modules for keyguide.

Provides register_commands() which uses deferred imports to keep
``keyguide --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from keyguide.commands.lookup import keys, normalize, resolve, search

    cli.add_command(resolve)
    cli.add_command(search)
    cli.add_command(keys)
    cli.add_command(normalize)
