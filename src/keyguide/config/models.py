"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, keyguide.toml only contains overrides.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

PlatformSetting = Literal["auto", "windows", "macos"]


class CoreConfig(BaseModel):
    """[core] section."""

    model_config = {"frozen": True}

    platform: PlatformSetting = "auto"
    bindings_path: str = "keybindings.json"


class SearchConfig(BaseModel):
    """[search] section."""

    model_config = {"frozen": True}

    hide_unmatched: bool = False
    limit: int = Field(default=50, ge=1)


class KeyguideConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    core: CoreConfig = Field(default_factory=CoreConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
