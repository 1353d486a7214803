"""Pluggy hook specifications for libforge.

Two hooks take part in the build pipeline (their errors are fatal):
``working_tree_status`` for the publish gate and ``sync_library`` for
the sync step. The ``post_*`` hooks are notifications dispatched after
each mutating step.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from libforge.domain.status import StatusEntry
    from libforge.infrastructure.workspace import Workspace

hookspec = pluggy.HookspecMarker("libforge")


class LibforgeHookSpec:
    """Hook specifications for the libforge plugin system."""

    @hookspec(firstresult=True)
    def working_tree_status(self, root: Path) -> list[StatusEntry] | None:
        """Return ``(status, path)`` entries for the working tree at *root*.

        The first non-None result wins. Return None to defer to another
        provider.
        """

    @hookspec
    def sync_library(self, workspace: Workspace, library: str) -> list[str] | None:
        """Reconcile *library*'s sibling references; return rewritten paths."""

    @hookspec
    def post_clean(self, library: str, target_dir: str) -> None:
        """Called after a library's build output was removed."""

    @hookspec
    def post_package(self, library: str, version: str, artifact: str) -> None:
        """Called after a library's artifact was produced."""

    @hookspec
    def post_install(self, library: str, version: str, location: str) -> None:
        """Called after an artifact was installed into the local store."""

    @hookspec
    def post_publish(self, library: str, version: str, locations: list[str]) -> None:
        """Called after an artifact was uploaded to the remote store."""
