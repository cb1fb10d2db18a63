"""Command class shared by the lookup commands.

``KeyguideCommand`` adds what every lookup needs without repeating the
decorators on each command:

- ``window=True`` adds ``--process``/``--window`` and hands the callback a
  single ``info: ActiveWindowInfo`` instead of two loose strings;
- ``limit=True`` adds ``--limit`` (positive, default from settings);
- ``examples=...`` adds an eager ``--examples`` flag so ``--help`` stays short.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any

import click

from keyguide.domain.rules import ActiveWindowInfo


def _show_examples(examples: str) -> Callable[[click.Context, click.Parameter, bool], None]:
    def callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n")
            click.echo(examples)
            ctx.exit(0)

    return callback


def _with_window_info(callback: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(callback)
    def wrapper(*args: Any, process: str | None, window: str | None, **kwargs: Any) -> Any:
        return callback(*args, info=ActiveWindowInfo(process=process, window=window), **kwargs)

    return wrapper


class KeyguideCommand(click.Command):
    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        window: bool = False,
        limit: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if window:
            self.params += [
                click.Option(["--process", "-p"], help="Active process name."),
                click.Option(["--window", "-w"], help="Active window title."),
            ]
            if self.callback is not None:
                self.callback = _with_window_info(self.callback)
        if limit:
            self.params.append(
                click.Option(
                    ["--limit"],
                    type=click.IntRange(min=1),
                    help="Maximum results (default: [search] limit).",
                )
            )
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_show_examples(examples),
                    help="Show usage examples.",
                )
            )
