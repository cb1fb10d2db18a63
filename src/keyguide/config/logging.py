"""Log routing for keyguide.

Domain and service modules log through stdlib ``logging``; telemetry logs
through structlog. Both render through one ProcessorFormatter on stderr,
which keeps stdout free for lookup results.

- Human (default): ``level logger message`` lines, no timestamps.
- JSON (``--log-json``): one object per event, ISO timestamp included.

Absorbed configuration problems are logged with ``extra={"issue": kind}``
and surface as an ``issue`` field. Once a snapshot is loaded,
:func:`bind_lookup_context` adds the platform and keybindings file to
every event.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog

from keyguide.domain.types import Platform


def _shared_processors(*, log_json: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if log_json:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    return processors


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route keyguide logging to stderr.

    Args:
        verbose: Show keyguide DEBUG events (resolution, ranking, skipped
            tokens). Otherwise only absorbed config problems appear.
        log_json: Emit JSON lines instead of console text.
    """
    structlog.contextvars.clear_contextvars()
    shared = _shared_processors(log_json=log_json)

    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[*shared, structlog.stdlib.ExtraAdder(allow=("issue",))],
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("keyguide").setLevel(logging.DEBUG if verbose else logging.WARNING)


def bind_lookup_context(*, platform: Platform, bindings: Path) -> None:
    """Tag subsequent events with the platform and keybindings file in use."""
    structlog.contextvars.bind_contextvars(platform=str(platform), bindings=str(bindings))
