"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy snapshot loading and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from keyguide.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from keyguide.config.settings import KeyguideSettings
    from keyguide.domain.snapshot import ConfigSnapshot
    from keyguide.domain.types import Platform
    from keyguide.services.lookup import LookupService
    from keyguide.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The keybindings file is read lazily on first use so ``--help``,
    ``--version`` and ``normalize`` never touch it.
    """

    def __init__(self, settings: KeyguideSettings) -> None:
        self.settings = settings
        self._snapshot: ConfigSnapshot | None = None

        from keyguide.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        from keyguide.services.telemetry import set_telemetry

        set_telemetry(settings.verbose)

    @property
    def platform(self) -> Platform:
        return self.settings.resolved_platform()

    @property
    def snapshot(self) -> ConfigSnapshot:
        """The configuration snapshot (loaded lazily on first access)."""
        if self._snapshot is None:
            from keyguide.config.keybindings import load_snapshot
            from keyguide.config.logging import bind_lookup_context

            path = self.settings.bindings_file()
            bind_lookup_context(platform=self.platform, bindings=path)
            self._snapshot = load_snapshot(path, self.platform)
        return self._snapshot

    def service(self, *, with_bindings: bool = True) -> LookupService:
        """A LookupService over the loaded snapshot, or an empty one."""
        from keyguide.domain.snapshot import ConfigSnapshot
        from keyguide.services.lookup import LookupService

        snapshot = self.snapshot if with_bindings else ConfigSnapshot(platform=self.platform)
        return LookupService(
            snapshot,
            hide_unmatched=self.settings.search.hide_unmatched,
            limit=self.settings.search.limit,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
