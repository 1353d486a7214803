"""BuildService: the orchestrated build operations.

Four operation modes compose discovery, graph construction, ordering,
closure resolution, and the per-library pipeline:

- ``install_lib``: one target plus its transitive dependencies. Only the
  target may publish; every prerequisite runs with publishing disabled.
- ``clean_libs`` / ``package_libs`` / ``install_libs``: one step for every
  library in topological order.
- ``publish_libs``: the full pipeline with publishing for every library.
- ``build_all``: the full pipeline for every library, publishing uniformly
  when asked.

Execution is sequential. The first fatal error stops the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from libforge.config.logging import library_context
from libforge.domain.options import BuildOptions, Installer
from libforge.domain.pipeline import PipelineRun
from libforge.errors import LibforgeError, LibraryNotFound
from libforge.infrastructure.graph.engine import build_order, topo_sort
from libforge.services.base import BaseService
from libforge.services.pipeline import BuildPipeline, deploy
from libforge.services.result import ServiceResult
from libforge.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

# A for-all action builds one library and returns its report entry.
type LibraryAction = Callable[[str], dict[str, Any]]


class BuildService(BaseService):
    """Builds, installs and publishes workspace libraries."""

    # ------------------------------------------------------------------
    # install_lib: single target with its upstream closure
    # ------------------------------------------------------------------

    @traced
    def install_lib(self, options: BuildOptions) -> ServiceResult:
        """Build *options.artifact_id* after everything it depends on.

        An unknown target is reported as a warning and nothing is built;
        that is not a failure.
        """
        op = "install_lib"
        warnings: list[str] = []
        runs: list[PipelineRun] = []
        try:
            with trace_span("build_graph"):
                build = self._workspace.build_graph()
            target = options.artifact_id
            if target is None or target not in build.adjacency:
                raise LibraryNotFound(target or "")

            closure = build_order(build, build.graph.transitive_dependencies(target))
            pipeline = BuildPipeline(self._workspace, options, warnings)
            for lib in closure:
                pipeline.run(lib, publish=False, runs=runs)
            pipeline.run(target, publish=options.publish, runs=runs)
        except LibraryNotFound as exc:
            logger.warning("%s", exc)
            return ServiceResult(
                ok=True,
                op=op,
                data={"artifact_id": exc.artifact_id, "found": False, "libraries": []},
                warnings=[str(exc)],
            )
        except LibforgeError as exc:
            return self._failure(op, exc, data=self._runs_data(runs), warnings=warnings)

        data = {"artifact_id": target, "found": True, **self._runs_data(runs)}
        data["dependencies"] = closure
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # for-all operations
    # ------------------------------------------------------------------

    @traced
    def clean_libs(self, options: BuildOptions | None = None) -> ServiceResult:
        """Delete the build output of every library."""
        options = options or BuildOptions()

        def action(lib: str) -> dict[str, Any]:
            bd = self._workspace.descriptor(lib, target_dir=options.target_dir)
            removed = self._workspace.packager.clean(bd)
            return {"library": lib, "target_dir": str(bd.target_dir), "removed": removed}

        return self._for_all("clean_libs", action)

    @traced
    def package_libs(self, options: BuildOptions | None = None) -> ServiceResult:
        """Produce the descriptor and artifact of every library."""
        options = options or BuildOptions()

        def action(lib: str) -> dict[str, Any]:
            bd = self._workspace.descriptor(lib, target_dir=options.target_dir)
            artifact = self._workspace.packager.package(bd, self._workspace.read_dependencies(lib))
            return {"library": lib, "version": bd.version, "artifact": str(artifact)}

        return self._for_all("package_libs", action)

    @traced
    def install_libs(self, options: BuildOptions | None = None) -> ServiceResult:
        """Install every already-packaged library into the local store."""
        options = options or BuildOptions()

        def action(lib: str) -> dict[str, Any]:
            bd = self._workspace.descriptor(lib, target_dir=options.target_dir)
            location = self._workspace.local_store.install(bd)
            return {
                "library": lib,
                "version": bd.version,
                "artifact": str(bd.artifact_file),
                "location": str(location),
            }

        return self._for_all("install_libs", action)

    @traced
    def publish_libs(self, options: BuildOptions | None = None) -> ServiceResult:
        """Full pipeline for every library, each one publishing."""
        options = (options or BuildOptions()).model_copy(update={"publish": True})
        return self._pipeline_all("publish_libs", options)

    @traced
    def build_all(self, options: BuildOptions | None = None) -> ServiceResult:
        """Full pipeline for every library; publishes all when ``options.publish``."""
        return self._pipeline_all("build_all", options or BuildOptions())

    # ------------------------------------------------------------------
    # deploy: push one packaged library to a store
    # ------------------------------------------------------------------

    @traced
    def deploy(self, options: BuildOptions) -> ServiceResult:
        """Deploy an already-packaged library with ``options.installer``."""
        op = "deploy"
        try:
            libraries = self._workspace.discover()
            target = options.artifact_id
            if target is None or target not in libraries:
                raise LibraryNotFound(target or "")
            bd = self._workspace.descriptor(target, target_dir=options.target_dir)
            with library_context(target, version=bd.version):
                locations = deploy(
                    self._workspace,
                    bd,
                    installer=options.installer,
                    sign_releases=options.sign_releases,
                )
        except LibraryNotFound as exc:
            logger.warning("%s", exc)
            return ServiceResult(
                ok=True,
                op=op,
                data={"artifact_id": exc.artifact_id, "found": False},
                warnings=[str(exc)],
            )
        except LibforgeError as exc:
            return self._failure(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "artifact_id": target,
                "found": True,
                "version": bd.version,
                "installer": str(options.installer),
                "locations": locations,
            },
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _pipeline_all(self, op: str, options: BuildOptions) -> ServiceResult:
        warnings: list[str] = []
        runs: list[PipelineRun] = []
        pipeline = BuildPipeline(self._workspace, options, warnings)

        def action(lib: str) -> dict[str, Any]:
            return pipeline.run(lib, publish=options.publish, runs=runs).to_dict()

        result = self._for_all(op, action, warnings=warnings)
        if result.ok:
            return result
        # Include the aborted run, which never returned a report entry.
        return result.model_copy(update={"data": {**result.data, **self._runs_data(runs)}})

    def _for_all(
        self,
        op: str,
        action: LibraryAction,
        *,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        """Run *action* on every library in topological order."""
        warnings = warnings if warnings is not None else []
        done: list[dict[str, Any]] = []
        try:
            with trace_span("build_graph"):
                order = topo_sort(self._workspace.build_graph())
            for lib in order:
                with library_context(lib), trace_span(lib):
                    done.append(action(lib))
        except LibforgeError as exc:
            return self._failure(
                op, exc, data={"count": len(done), "libraries": done}, warnings=warnings
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(done), "order": order, "libraries": done},
            warnings=warnings,
        )

    @staticmethod
    def _runs_data(runs: list[PipelineRun]) -> dict[str, Any]:
        return {"count": len(runs), "libraries": [r.to_dict() for r in runs]}
