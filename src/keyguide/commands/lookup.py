"""Commands: resolve, search, keys, normalize."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from keyguide.commands._base import KeyguideCommand

if TYPE_CHECKING:
    from keyguide.commands._context import AppContext
    from keyguide.domain.rules import ActiveWindowInfo


@click.command(
    cls=KeyguideCommand,
    window=True,
    examples="""\
  keyguide resolve --process Code.exe
  keyguide resolve --window "Untitled - Notepad"
  keyguide --platform macos resolve --process Finder""",
)
@click.pass_obj
def resolve(app: AppContext, info: ActiveWindowInfo) -> None:
    """Show which app rules match the active window."""
    app.emit(app.service().resolve(info))


@click.command(
    cls=KeyguideCommand,
    window=True,
    limit=True,
    examples="""\
  keyguide search --process Code.exe copy
  keyguide search --process chrome.exe "new tab" --limit 5
  keyguide --json search --window Excel sum""",
)
@click.argument("query", nargs=-1)
@click.pass_obj
def search(
    app: AppContext,
    info: ActiveWindowInfo,
    query: tuple[str, ...],
    limit: int | None,
) -> None:
    """Rank shortcuts for the active window by a text query."""
    app.emit(app.service().search(info, " ".join(query), limit=limit))


@click.command(
    cls=KeyguideCommand,
    window=True,
    limit=True,
    examples="""\
  keyguide keys --process Code.exe ctrl
  keyguide keys --process Code.exe ctrl shift
  keyguide --platform macos keys cmd c""",
)
@click.argument("held", nargs=-1)
@click.pass_obj
def keys(
    app: AppContext,
    info: ActiveWindowInfo,
    held: tuple[str, ...],
    limit: int | None,
) -> None:
    """Rank shortcuts for the active window by currently held keys."""
    app.emit(app.service().keys(info, list(held), limit=limit))


@click.command(
    cls=KeyguideCommand,
    examples="""\
  keyguide normalize "shift+ctrl+p"
  keyguide --platform macos normalize "cmd+k -> cmd+s"
  keyguide -q normalize 'control + alt + del'""",
)
@click.argument("combo")
@click.pass_obj
def normalize(app: AppContext, combo: str) -> None:
    """Print the canonical form of a key combination."""
    app.emit(app.service(with_bindings=False).normalize(combo))
