"""Workspace: the single dependency injected into every service.

Owns the settings, the process-wide version catalog, the plugin manager
(with built-in git and sync plugins), the packager, and both artifact
stores. Graph construction is not cached: each call to
:meth:`Workspace.build_graph` rediscovers libraries and rereads every
manifest, so an invocation always works on the current tree.
"""

from __future__ import annotations

import logging
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Any

from libforge.domain.catalog import VersionCatalog, init_catalog
from libforge.domain.descriptor import BuildDescriptor, build_descriptor
from libforge.errors import VersionControlError
from libforge.infrastructure.discovery import discover_libraries
from libforge.infrastructure.graph.engine import GraphBuild, build_graph
from libforge.infrastructure.manifest import read_manifest, sibling_dependencies
from libforge.infrastructure.packaging import Packager
from libforge.infrastructure.store import LocalArtifactStore, RemoteArtifactStore
from libforge.plugins.builtins.git import GitPlugin
from libforge.plugins.builtins.sync import CatalogSyncPlugin
from libforge.plugins.manager import PluginManager

if TYPE_CHECKING:
    from libforge.config.settings import LibforgeSettings
    from libforge.domain.coordinates import Coordinate, LibraryId
    from libforge.domain.status import StatusEntry

logger = logging.getLogger(__name__)


class Workspace:
    """A monorepo of libraries plus the collaborators needed to build them.

    Collaborators may be injected (tests pass fakes); otherwise they are
    created from settings on first use.
    """

    def __init__(
        self,
        settings: LibforgeSettings,
        *,
        plugins: PluginManager | None = None,
        packager: Packager | None = None,
        local_store: LocalArtifactStore | None = None,
        remote_store: RemoteArtifactStore | None = None,
    ) -> None:
        self.settings = settings
        self.root = settings.workspace_root
        self.packager = packager or Packager(workspace_root=self.root)
        self.local_store = local_store or LocalArtifactStore(settings.install.local_repository)
        self.remote_store = remote_store or RemoteArtifactStore(settings.publish)
        self.plugins = plugins or self._default_plugins()

    def _default_plugins(self) -> PluginManager:
        pm = PluginManager()
        pm.register_plugin(GitPlugin(self.settings.git), name="git")
        if self.settings.plugins.sync:
            pm.register_plugin(CatalogSyncPlugin(), name="sync")
        pm.discover_and_load(local_dir=self.root / self.settings.plugins.local_dir)
        return pm

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    @cached_property
    def catalog(self) -> VersionCatalog:
        """The process-wide catalog, loaded on first access."""
        return init_catalog(self.settings.catalog_path)

    # ------------------------------------------------------------------
    # Libraries and graph
    # ------------------------------------------------------------------

    @property
    def libs_root(self) -> Path:
        return self.settings.libs_root

    def discover(self) -> list[LibraryId]:
        return discover_libraries(self.libs_root, hidden_prefix=self.settings.libs.hidden_prefix)

    def manifest_path(self, library: LibraryId) -> Path:
        return self.libs_root / library / self.settings.libs.manifest

    def read_dependencies(self, library: LibraryId) -> dict[Coordinate, Any]:
        """All declared dependencies of *library*, sibling or not."""
        return read_manifest(self.manifest_path(library))

    def dependency_map(self, libraries: list[LibraryId]) -> dict[LibraryId, set[LibraryId]]:
        """``library -> sibling libraries it depends on`` for every library."""
        group_id = self.settings.build.group_id
        return {
            lib: sibling_dependencies(
                self.manifest_path(lib), group_id=group_id, libraries=libraries
            )
            for lib in libraries
        }

    def build_graph(self) -> GraphBuild:
        """Discover libraries, read manifests, and build the dependency graph."""
        libraries = self.discover()
        build = build_graph(self.dependency_map(libraries))
        logger.debug(
            "Dependency graph: %d libraries, %d edges",
            len(build.adjacency),
            build.graph.number_of_edges(),
        )
        return build

    def descriptor(self, library: LibraryId, *, target_dir: str | None = None) -> BuildDescriptor:
        """Fresh :class:`BuildDescriptor` for *library*."""
        build = self.settings.build
        return build_descriptor(
            library,
            libs_root=self.libs_root,
            group=build.group_id,
            version=self.catalog.version_of(library),
            target_dir=target_dir or build.target_dir,
            source_dirs=tuple(build.source_dirs),
            extension=build.artifact_extension,
        )

    # ------------------------------------------------------------------
    # Version control
    # ------------------------------------------------------------------

    def working_tree_status(self) -> list[StatusEntry]:
        """Ask the status provider for a fresh snapshot. Never cached."""
        entries = self.plugins.hook.working_tree_status(root=self.root)
        if entries is None:
            msg = "No working-tree status provider is enabled"
            raise VersionControlError(msg, root=str(self.root))
        return list(entries)
