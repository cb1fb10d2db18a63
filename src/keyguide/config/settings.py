"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``KEYGUIDE_*`` prefix
  3. TOML file    — ``keyguide.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`keyguide.config.discovery`.
"""

from __future__ import annotations

import sys
import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from keyguide.config.discovery import find_config, resolve_bindings_path
from keyguide.config.models import CoreConfig, SearchConfig
from keyguide.domain.types import Platform


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``keyguide.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


def detect_platform() -> Platform:
    """Host platform. Only the settings layer consults the running OS."""
    return Platform.MACOS if sys.platform == "darwin" else Platform.WINDOWS


class KeyguideSettings(BaseSettings):
    """Unified settings for the keyguide CLI.

    Attributes:
        base_dir: Directory relative paths resolve against (parent of
            ``keyguide.toml``, or CWD if no config found).
        config_path: The TOML file in effect, or None.
        platform: ``--platform`` override; falls back to ``[core] platform``.
        bindings: ``--bindings`` override; falls back to ``[core] bindings_path``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "KEYGUIDE_",
        "env_nested_delimiter": "__",
    }

    base_dir: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    platform: Platform | None = None
    bindings: str | None = None

    # --- TOML sections ---
    core: CoreConfig = Field(default_factory=CoreConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        base_dir: Path | None = None,
        **cli_flags: Any,
    ) -> KeyguideSettings:
        """Construct settings from CLI invocation.

        Discovers ``keyguide.toml`` via walk-up (or explicit *config_path*),
        resolves *base_dir* from the config file's parent directory, and
        merges CLI flags as highest-priority overrides. Flags left at None
        do not shadow lower-priority sources.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(base_dir)

        resolved_dir = base_dir
        if resolved_dir is None:
            resolved_dir = toml_path.parent if toml_path else Path.cwd()

        flags = {k: v for k, v in cli_flags.items() if v is not None}
        _tls.toml_path = toml_path
        try:
            return cls(
                base_dir=resolved_dir,
                config_path=toml_path,
                **flags,
            )
        finally:
            _tls.toml_path = None

    def resolved_platform(self) -> Platform:
        """Effective platform: flag, then ``[core] platform``, then the host."""
        if self.platform is not None:
            return self.platform
        if self.core.platform != "auto":
            return Platform(self.core.platform)
        return detect_platform()

    def bindings_file(self) -> Path:
        """Keybindings file path, resolved against :attr:`base_dir`."""
        return resolve_bindings_path(self.bindings or self.core.bindings_path, self.base_dir)
