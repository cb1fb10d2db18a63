"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from keyguide.output.console import create_console, get_output, style_for_scope
from keyguide.services.result import Op

if TYPE_CHECKING:
    from rich.console import Console

    from keyguide.services.result import ServiceResult

NO_RESULTS = "No results"


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        _OP_RENDERERS[result.op](result, console, verbose=verbose)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op is Op.NORMALIZE:
        return str(result.data.get("combo", ""))
    return "\n".join(_quiet_line(item) for item in result.items)


# ── Helpers ───────────────────────────────────────────────────────────


def _quiet_line(item: dict[str, Any]) -> str:
    if "action" in item:
        return f"{item.get('key', '')}\t{item['action']}"
    return str(item.get("name", ""))


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="kg.ok")
    op = Text(f"  {result.op}", style="kg.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="kg.key")
    style = "kg.combo" if key == "combo" else ""
    console.print(k, Text(str(value), style=style), end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 10 else "dim"

    line = f"{prefix}[{style}]{duration:>8.3f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _context_header(console: Console, data: dict[str, Any]) -> None:
    apps = data.get("apps")
    if apps is not None:
        _field(console, "apps", ", ".join(apps) if apps else "-")
    if data.get("query"):
        _field(console, "query", data["query"])
    if data.get("held"):
        _field(console, "held", " + ".join(data["held"]))


def _binding_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("", no_wrap=True)
    table.add_column("Action", style="kg.action")
    table.add_column("Key", style="kg.combo", no_wrap=True)
    table.add_column("App", style="kg.app")
    table.add_column("Score", style="kg.score", justify="right")
    if verbose:
        table.add_column("Tags", style="dim")
        table.add_column("Description", style="dim")

    for item in items:
        row = [
            str(item.get("icon", "")),
            str(item.get("action", "")),
            str(item.get("key", "")),
            str(item.get("app", "")),
            str(item.get("score", "")),
        ]
        if verbose:
            row.append(", ".join(item.get("tags", [])))
            row.append(str(item.get("description", "")))
        table.add_row(*row)
    return table


# ── Op renderers ──────────────────────────────────────────────────────


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "process", data.get("process") or "-")
    _field(console, "window", data.get("window") or "-")
    items = result.items
    if not items:
        console.print(Text(f"  {NO_RESULTS}", style="dim"))
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("", no_wrap=True)
    table.add_column("App", style="kg.app")
    table.add_column("Scope")
    table.add_column("Match")
    for item in items:
        scope = str(item.get("scope", ""))
        table.add_row(
            str(item.get("icon", "")),
            str(item.get("name", "")),
            Text(scope, style=style_for_scope(scope)),
            str(item.get("specificity", "")),
        )
    console.print(table)


def _render_bindings(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _context_header(console, result.data)
    items = result.items
    if not items:
        console.print(Text(f"  {NO_RESULTS}", style="dim"))
        return
    console.print(_binding_table(items, verbose=verbose))
    console.print(Text(f"  {len(items)} shortcut(s)", style="dim"))


def _render_normalize(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "input", data.get("input", ""))
    _field(console, "combo", data.get("combo", ""))
    if verbose:
        _field(console, "platform", data.get("platform", ""))
        for index, chord in enumerate(data.get("chords", [])):
            _field(console, f"step {index + 1}", ", ".join(chord))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="kg.error")
    op = Text(f"  {result.op}", style="kg.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg)
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


_OP_RENDERERS: dict[Op, Callable[..., None]] = {
    Op.RESOLVE: _render_resolve,
    Op.SEARCH: _render_bindings,
    Op.KEYS: _render_bindings,
    Op.NORMALIZE: _render_normalize,
}
