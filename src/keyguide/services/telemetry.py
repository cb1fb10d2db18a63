"""Lookup timing: one span per service operation, one child per engine stage.

Stages are fixed (:class:`Stage`): resolving app identities, building the
candidate set, and ranking it. Each stage records the sizes it produced, so
``--verbose`` output shows where a lookup narrowed or widened.

Off by default; when off every hook costs a single ContextVar read.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, ParamSpec

import structlog

from keyguide.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("keyguide_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("keyguide_active_span", default=None)


class Stage(StrEnum):
    RESOLVE = "resolve"
    BUILD = "build"
    RANK = "rank"


@dataclass
class Span:
    """Wall-clock timing of one operation or stage, plus recorded counts."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def close(self) -> None:
        self.finished = time.perf_counter()

    def record(self, **values: Any) -> None:
        self.annotations.update(values)

    def stages(self) -> list[str]:
        return [child.name for child in self.children]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 3)}
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def set_telemetry(enabled: bool) -> None:
    """Switch stage timing on or off for the current context."""
    _enabled.set(enabled)


def telemetry_enabled() -> bool:
    return _enabled.get()


@contextmanager
def stage(name: Stage) -> Generator[Span | None]:
    """Time one engine stage under the running operation.

    Yields None outside a traced operation, so engine code used directly
    (tests, embedding) pays nothing.
    """
    operation = _active.get() if _enabled.get() else None
    if operation is None:
        yield None
        return

    span = Span(name=str(name))
    operation.children.append(span)
    try:
        yield span
    finally:
        span.close()


P = ParamSpec("P")


def traced(func: Callable[P, ServiceResult]) -> Callable[P, ServiceResult]:
    """Time a LookupService operation and attach its stage tree to ``meta``.

    The root span is named after the operation and records the result
    count and warning count.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> ServiceResult:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__name__)
        token = _active.set(span)
        log = structlog.get_logger("keyguide.telemetry")
        try:
            result = func(*args, **kwargs)
        except Exception:
            span.close()
            log.debug("lookup.failed", op=span.name, stages=span.stages())
            raise
        finally:
            _active.reset(token)

        span.close()
        if "count" in result.data:
            span.record(count=result.data["count"])
        if result.warnings:
            span.record(warnings=len(result.warnings))
        log.debug(
            "lookup.timed",
            op=span.name,
            ok=result.ok,
            duration_ms=round(span.duration_ms, 3),
            stages=span.stages(),
        )
        meta = {**(result.meta or {}), "telemetry": span.to_dict()}
        return result.model_copy(update={"meta": meta})

    return wrapper
