"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy runtime construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from sketchctx.config.logging import configure_logging
from sketchctx.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from sketchctx.config.settings import SketchSettings
    from sketchctx.server.runtime import Runtime
    from sketchctx.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The runtime is built on first use so ``--help`` and ``--version``
    never touch relay state or HTTP clients.
    """

    def __init__(self, settings: SketchSettings) -> None:
        self.settings = settings
        self._runtime: Runtime | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def runtime(self) -> Runtime:
        if self._runtime is None:
            from sketchctx.server.runtime import build_runtime

            self._runtime = build_runtime(self.settings)
        return self._runtime

    def reconfigure(self, **sections: dict[str, Any]) -> None:
        """Apply command-level overrides (``None`` values keep the configured value)."""
        self.settings = self.settings.with_overrides(**sections)
        self._runtime = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout; warnings go to stderr unless in JSON mode.
        * Failure: stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
