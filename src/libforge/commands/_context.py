"""AppContext: the object every subcommand receives via ``@click.pass_obj``.

The root group builds it from the resolved settings. It owns logging and
telemetry setup, creates the :class:`Workspace` on demand, and turns a
:class:`ServiceResult` into output plus an exit status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from libforge.domain.options import BuildOptions
from libforge.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from libforge.config.settings import LibforgeSettings
    from libforge.infrastructure.workspace import Workspace
    from libforge.services.result import ServiceResult


class AppContext:
    """Per-invocation state shared by the command tree.

    Nothing here touches the workspace until a command asks for it, so
    ``--help``, ``--version`` and ``--examples`` work outside a workspace.
    """

    def __init__(self, settings: LibforgeSettings, *, target_dir: str | None = None) -> None:
        self.settings = settings
        self.target_dir = target_dir
        self._workspace: Workspace | None = None

        from libforge.config.logging import configure_logging
        from libforge.services.telemetry import enable_telemetry

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def workspace(self) -> Workspace:
        if self._workspace is None:
            from libforge.infrastructure.workspace import Workspace

            self._workspace = Workspace(self.settings)
        return self._workspace

    @property
    def output(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def options(self, **overrides: Any) -> BuildOptions:
        """:class:`BuildOptions` for one command, carrying the global ``--target-dir``."""
        return BuildOptions(target_dir=self.target_dir, **overrides)

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and exit 1 if it failed.

        Successful output goes to stdout; in human modes its warnings follow
        on stderr so piped output stays clean. JSON output already carries
        the warnings. A failed result goes to stderr in full.
        """
        output = self.output
        text = format_result(result, settings=output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)
        click.echo(text)
        if output.json_output:
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
