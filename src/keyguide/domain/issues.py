"""Structured record of absorbed configuration problems."""

from __future__ import annotations

from pydantic import BaseModel

from keyguide.domain.types import IssueKind


class ConfigIssue(BaseModel):
    """A non-fatal problem found while building or querying a snapshot."""

    model_config = {"frozen": True}

    kind: IssueKind
    message: str
    location: str = ""

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message
