"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Provides lazy Vault construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from notereap.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from notereap.config.settings import NotereapSettings
    from notereap.infrastructure.vault import Vault
    from notereap.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The vault is created on first use so ``--help`` and ``--version``
    never open the index.
    """

    def __init__(self, settings: NotereapSettings) -> None:
        self.settings = settings
        self._vault: Vault | None = None

        from notereap.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )

    @property
    def vault(self) -> Vault:
        """The vault instance (created lazily on first access)."""
        if self._vault is None:
            from notereap.infrastructure.vault import Vault

            self._vault = Vault(self.settings)
        return self._vault

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def interactive(self) -> bool:
        """Whether prompts are allowed (not --no-interact, not --json)."""
        return not (self.settings.no_interact or self.settings.json_output)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
