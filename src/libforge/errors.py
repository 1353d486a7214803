"""Exception taxonomy for libforge.

Every fatal condition raised below the service layer derives from
:class:`LibforgeError` and carries a stable ``code``. Services translate
these into :class:`~libforge.services.result.ServiceError` payloads.

INVARIANT: Any LibforgeError aborts the remainder of the current batch.
There is no skip-and-continue across libraries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from libforge.domain.status import StatusEntry


class LibforgeError(Exception):
    """Base class for all fatal libforge errors."""

    code = "LIBFORGE_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class DiscoveryError(LibforgeError):
    """The libraries root is missing or unreadable."""

    code = "DISCOVERY_ERROR"


class ManifestParseError(LibforgeError):
    """A dependency manifest is missing, malformed, or names an unknown sibling."""

    code = "MANIFEST_ERROR"


class CyclicDependencyError(LibforgeError):
    """Inserting an edge would close a cycle in the dependency graph."""

    code = "CYCLIC_DEPENDENCY"

    def __init__(self, dependent: str, dependency: str, cycle: list[str]) -> None:
        path = " -> ".join(cycle)
        super().__init__(
            f"Adding {dependent} -> {dependency} would create a cycle: {path}",
            dependent=dependent,
            dependency=dependency,
            cycle=cycle,
        )
        self.cycle = cycle


class CatalogError(LibforgeError):
    """The version catalog is unreadable, uninitialized, or lacks an entry."""

    code = "CATALOG_ERROR"


class VersionControlError(LibforgeError):
    """The working-tree status provider failed."""

    code = "VCS_ERROR"


class DirtyWorkingTreeError(LibforgeError):
    """Publish was requested while tracked files have uncommitted changes."""

    code = "DIRTY_WORKING_TREE"

    def __init__(self, entries: list[StatusEntry]) -> None:
        super().__init__(
            "All changes must be committed before publishing.",
            changes=[f"{e.status} {e.path}" for e in entries],
        )
        self.entries = entries


class PackagingError(LibforgeError):
    """Writing the descriptor or the artifact failed."""

    code = "PACKAGING_ERROR"


class InstallError(LibforgeError):
    """Copying into the local repository failed."""

    code = "INSTALL_ERROR"


class ArtifactMissingError(LibforgeError):
    """An install or deploy was attempted before the artifact was packaged."""

    code = "ARTIFACT_MISSING"


class PublishError(LibforgeError):
    """Uploading to the remote store (or signing for it) failed."""

    code = "PUBLISH_ERROR"


class LibraryNotFound(LookupError):
    """A named target library does not exist in the workspace.

    Recoverable: reported to the operator, never a failed run.
    """

    def __init__(self, artifact_id: str) -> None:
        super().__init__(f"Can't find: {artifact_id}")
        self.artifact_id = artifact_id
