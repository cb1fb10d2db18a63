"""Lookup results: what every LookupService operation hands to the CLI.

A result is immutable. Successful lookups carry an ``items`` list in
``data`` (identities or scored bindings) and the matching ``count``;
``normalize`` carries the canonical combo instead. Configuration problems
never fail a lookup, they ride along as ``warnings``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class Op(StrEnum):
    RESOLVE = "resolve"
    SEARCH = "search"
    KEYS = "keys"
    NORMALIZE = "normalize"


class ErrorCode(StrEnum):
    EMPTY_COMBO = "EMPTY_COMBO"


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one lookup.

    Attributes:
        ok: False only for input the operation cannot interpret.
        op: The lookup that produced it.
        data: Operation payload.
        warnings: Configuration issues found while loading the snapshot.
        error: Set when ``ok`` is False.
        meta: Stage timings when telemetry is on.
    """

    model_config = {"frozen": True}

    ok: bool
    op: Op
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def listing(
        cls,
        op: Op,
        items: list[dict[str, Any]],
        *,
        warnings: list[str] | None = None,
        **context: Any,
    ) -> ServiceResult:
        """A successful lookup returning *items*, with *context* fields alongside."""
        return cls(
            ok=True,
            op=op,
            data={**context, "items": items, "count": len(items)},
            warnings=warnings or [],
        )

    @classmethod
    def failure(cls, op: Op, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))

    @property
    def items(self) -> list[dict[str, Any]]:
        return list(self.data.get("items", []))
