"""Built-in sync plugin: align sibling dependency versions with the catalog."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pluggy

from libforge.infrastructure.manifest import sync_sibling_versions

if TYPE_CHECKING:
    from libforge.infrastructure.workspace import Workspace

hookimpl = pluggy.HookimplMarker("libforge")

logger = logging.getLogger(__name__)


class CatalogSyncPlugin:
    """Rewrites sibling ``version`` entries in a library's manifest."""

    @hookimpl
    def sync_library(self, workspace: Workspace, library: str) -> list[str] | None:
        manifest = workspace.manifest_path(library)
        changed = sync_sibling_versions(
            manifest,
            group_id=workspace.settings.build.group_id,
            versions=workspace.catalog,
        )
        if not changed:
            return []
        logger.info("Synced sibling versions in %s", manifest)
        return [str(manifest)]
