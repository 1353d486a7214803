"""BuildPipeline: the ordered mutating steps for one library.

Steps run strictly in order: sync, gate, clean, package, install, publish.
The gate only queries version control when the run publishes, and always
before anything is cleaned. Any :class:`LibforgeError` marks the run
aborted and propagates; earlier steps are never rolled back.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from libforge.config.logging import library_context
from libforge.domain.options import BuildOptions, Installer
from libforge.domain.pipeline import PipelineRun, PipelineState
from libforge.domain.status import tracked_changes
from libforge.errors import DirtyWorkingTreeError, LibforgeError
from libforge.services.telemetry import trace_span

if TYPE_CHECKING:
    from libforge.domain.descriptor import BuildDescriptor
    from libforge.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BuildPipeline:
    """Runs the full pipeline for one library at a time.

    Args:
        workspace: The workspace whose collaborators do the work.
        options: Operation options (target dir, signing).
        warnings: Shared list that collects non-fatal plugin failures.
    """

    def __init__(self, workspace: Workspace, options: BuildOptions, warnings: list[str]) -> None:
        self._workspace = workspace
        self._options = options
        self._warnings = warnings

    def run(self, library: str, *, publish: bool, runs: list[PipelineRun]) -> PipelineRun:
        """Run every step for *library* and append its record to *runs*.

        The record is appended before the first step so that an aborted run
        is still reported.
        """
        bd = self._workspace.descriptor(library, target_dir=self._options.target_dir)
        run = PipelineRun(library=library, version=bd.version, publish=publish)
        runs.append(run)
        with (
            library_context(library, version=bd.version),
            trace_span(f"pipeline:{library}", version=bd.version, publish=publish) as span,
        ):
            try:
                self._sync(run)
                self._gate(run)
                self._clean(run, bd)
                self._package(run, bd)
                self._install(run, bd)
                if publish:
                    self._publish(run, bd)
                else:
                    run.advance(PipelineState.SKIPPED)
            except LibforgeError as exc:
                run.abort(exc.message)
                logger.warning("Pipeline aborted for %s at %s: %s", library, run.history[-2], exc)
                raise
            finally:
                if span is not None:
                    span.annotate("state", str(run.state))
        return run

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _step(self, run: PipelineRun, state: PipelineState) -> None:
        run.advance(state)
        logger.debug("pipeline.step %s -> %s", run.library, state)

    def _sync(self, run: PipelineRun) -> None:
        results = self._workspace.plugins.hook.sync_library(
            workspace=self._workspace, library=run.library
        )
        for paths in results:
            for path in paths or []:
                logger.info("Synced %s", path)
        self._step(run, PipelineState.SYNCED)

    def _gate(self, run: PipelineRun) -> None:
        if run.publish:
            dirty = tracked_changes(self._workspace.working_tree_status())
            if dirty:
                raise DirtyWorkingTreeError(dirty)
        self._step(run, PipelineState.GATED)

    def _clean(self, run: PipelineRun, bd: BuildDescriptor) -> None:
        self._workspace.packager.clean(bd)
        self._step(run, PipelineState.CLEANED)
        self._workspace.plugins.notify(
            "post_clean", self._warnings, library=bd.name, target_dir=str(bd.target_dir)
        )

    def _package(self, run: PipelineRun, bd: BuildDescriptor) -> None:
        deps = self._workspace.read_dependencies(bd.name)
        artifact = self._workspace.packager.package(bd, deps)
        run.artifact = str(artifact)
        self._step(run, PipelineState.PACKAGED)
        self._workspace.plugins.notify(
            "post_package",
            self._warnings,
            library=bd.name,
            version=bd.version,
            artifact=str(artifact),
        )

    def _install(self, run: PipelineRun, bd: BuildDescriptor) -> None:
        location = self._workspace.local_store.install(bd)
        self._step(run, PipelineState.INSTALLED)
        self._workspace.plugins.notify(
            "post_install",
            self._warnings,
            library=bd.name,
            version=bd.version,
            location=str(location),
        )

    def _publish(self, run: PipelineRun, bd: BuildDescriptor) -> None:
        locations = deploy(
            self._workspace,
            bd,
            installer=Installer.REMOTE,
            sign_releases=self._options.sign_releases,
        )
        self._step(run, PipelineState.PUBLISHED)
        self._workspace.plugins.notify(
            "post_publish",
            self._warnings,
            library=bd.name,
            version=bd.version,
            locations=locations,
        )


def deploy(
    workspace: Workspace,
    bd: BuildDescriptor,
    *,
    installer: Installer = Installer.LOCAL,
    sign_releases: bool = False,
) -> list[str]:
    """Deploy a packaged library to the local or remote store."""
    logger.info("Deploying %s (%s)", bd.artifact_file.name, installer)
    if installer is Installer.REMOTE:
        return workspace.remote_store.publish(bd, sign_releases=sign_releases)
    return [str(workspace.local_store.install(bd))]
