"""GraphService: read-only queries over the dependency graph."""

from __future__ import annotations

from libforge.errors import LibforgeError
from libforge.infrastructure.graph.engine import build_order, topo_sort
from libforge.services.base import BaseService
from libforge.services.result import ServiceError, ServiceResult
from libforge.services.telemetry import traced


class GraphService(BaseService):
    """Answers questions about libraries and their dependencies."""

    @traced
    def list_libraries(self) -> ServiceResult:
        """Every discovered library with its version and sibling dependencies.

        Libraries missing from the catalog are listed with version None and
        a warning rather than failing the listing.
        """
        try:
            build = self._workspace.build_graph()
            catalog = self._workspace.catalog
        except LibforgeError as exc:
            return self._failure("list_libraries", exc)

        warnings: list[str] = []
        items = []
        for lib in sorted(build.adjacency):
            version = catalog.get(lib)
            if version is None:
                warnings.append(f"No catalog version for {lib}")
            items.append(
                {
                    "name": lib,
                    "version": version,
                    "depends_on": sorted(build.adjacency[lib]),
                }
            )
        return ServiceResult(
            ok=True,
            op="list_libraries",
            data={"count": len(items), "items": items},
            warnings=warnings,
        )

    @traced
    def order(self) -> ServiceResult:
        """The build order: every dependency before its dependents."""
        try:
            order = topo_sort(self._workspace.build_graph())
        except LibforgeError as exc:
            return self._failure("order", exc)
        return ServiceResult(ok=True, op="order", data={"count": len(order), "order": order})

    @traced
    def dependencies(self, artifact_id: str) -> ServiceResult:
        """Transitive dependencies of *artifact_id*, in build order."""
        try:
            build = self._workspace.build_graph()
        except LibforgeError as exc:
            return self._failure("dependencies", exc)

        if artifact_id not in build.adjacency:
            return ServiceResult(
                ok=False,
                op="dependencies",
                error=ServiceError(
                    code="NOT_FOUND",
                    message=f"Library '{artifact_id}' not found in workspace",
                ),
            )

        closure = build_order(build, build.graph.transitive_dependencies(artifact_id))
        return ServiceResult(
            ok=True,
            op="dependencies",
            data={
                "artifact_id": artifact_id,
                "direct": sorted(build.adjacency[artifact_id]),
                "count": len(closure),
                "items": closure,
            },
        )
