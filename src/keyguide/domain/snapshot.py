"""Immutable configuration snapshot handed to the core."""

from __future__ import annotations

from dataclasses import dataclass

from keyguide.domain.bindings import KeyBinding
from keyguide.domain.issues import ConfigIssue
from keyguide.domain.rules import AppRule
from keyguide.domain.types import Platform


@dataclass(frozen=True)
class ConfigSnapshot:
    """Rules and bindings for one platform, never mutated after construction.

    A live configuration edit produces a new snapshot that replaces this one
    between query cycles.
    """

    platform: Platform
    rules: tuple[AppRule, ...] = ()
    bindings: tuple[KeyBinding, ...] = ()
    issues: tuple[ConfigIssue, ...] = ()
