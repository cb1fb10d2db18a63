"""Rich Console factory and theme for keyguide output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

KEYGUIDE_THEME = Theme(
    {
        "kg.ok": "bold green",
        "kg.error": "bold red",
        "kg.op": "bold cyan",
        "kg.key": "dim",
        "kg.action": "bold",
        "kg.combo": "bold magenta",
        "kg.app": "cyan",
        "kg.score": "magenta",
        "kg.scope.app": "green",
        "kg.scope.os": "blue",
        "kg.scope.wildcard": "dim",
    }
)

_SCOPE_STYLES: dict[str, str] = {
    "app": "kg.scope.app",
    "os": "kg.scope.os",
    "wildcard": "kg.scope.wildcard",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=KEYGUIDE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_scope(scope: str) -> str:
    """Return the Rich style name for a rule scope."""
    return _SCOPE_STYLES.get(scope, "")
