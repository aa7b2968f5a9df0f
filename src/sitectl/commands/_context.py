"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands through
``@click.pass_obj``. Holds the lazily built Vault and routes results to
stdout/stderr with the right exit code.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from sitectl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from sitectl.config.settings import SiteSettings
    from sitectl.infrastructure.vault import Vault
    from sitectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The vault is created on first use so ``--help`` and ``--version``
    never touch the site directory.
    """

    def __init__(self, settings: SiteSettings) -> None:
        self.settings = settings
        self._vault: Vault | None = None

        from sitectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from sitectl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def vault(self) -> Vault:
        """The vault instance (created lazily on first access)."""
        if self._vault is None:
            from sitectl.infrastructure.recent import RecentPaths
            from sitectl.infrastructure.vault import Vault

            recent = RecentPaths(self.settings.watch.self_write_ttl_seconds)
            self._vault = Vault(self.settings, recent=recent)
        return self._vault

    @property
    def interactive(self) -> bool:
        """True when prompts may fire: no ``--no-interact``, no ``--json``, a TTY on stdin."""
        return (
            not self.settings.no_interact
            and not self.settings.json_output
            and sys.stdin.isatty()
        )

    def emit(self, result: ServiceResult, *, exit_on_error: bool = True) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout; warnings go to stderr so piped output stays clean.
        * Failure: stderr, then exit code 1 (unless *exit_on_error* is off,
          which long-running commands use to keep going).
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # JSON output already carries the warnings.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            if exit_on_error:
                raise SystemExit(1)
