"""Library discovery: one library per visible subdirectory of the libs root."""

from __future__ import annotations

import logging
from pathlib import Path

from libforge.domain.coordinates import LibraryId
from libforge.errors import DiscoveryError

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."


def is_visible(name: str, hidden_prefix: str = HIDDEN_PREFIX) -> bool:
    """Names starting with *hidden_prefix* are never libraries."""
    return not (hidden_prefix and name.startswith(hidden_prefix))


def discover_libraries(libs_root: Path, *, hidden_prefix: str = HIDDEN_PREFIX) -> list[LibraryId]:
    """Enumerate library ids under *libs_root*.

    A library is an immediate subdirectory that is a real directory (not a
    symlink to one) and whose name passes :func:`is_visible`. The result is
    sorted by name so downstream tie-breaking is deterministic; callers must
    not depend on it for anything beyond that.

    Raises:
        DiscoveryError: *libs_root* is missing or cannot be listed.
    """
    try:
        entries = list(libs_root.iterdir())
    except OSError as exc:
        msg = f"Cannot read libraries root {libs_root}: {exc}"
        raise DiscoveryError(msg, libs_root=str(libs_root)) from exc

    libraries = sorted(
        entry.name
        for entry in entries
        if entry.is_dir() and not entry.is_symlink() and is_visible(entry.name, hidden_prefix)
    )
    logger.debug("Discovered %d libraries under %s", len(libraries), libs_root)
    return libraries
