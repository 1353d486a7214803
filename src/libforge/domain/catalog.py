"""Process-wide version catalog.

The catalog maps library name to version string. It is loaded exactly once
per process by :func:`init_catalog` and is read-only afterwards: the
mapping is exposed through a ``MappingProxyType`` and there is no mutation
API. Reading before initialization raises :class:`CatalogError`.
"""

from __future__ import annotations

import logging
import threading
import tomllib
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from libforge.errors import CatalogError

logger = logging.getLogger(__name__)


class VersionCatalog(Mapping[str, str]):
    """Immutable ``name -> version`` mapping with its source path."""

    def __init__(self, versions: Mapping[str, str], *, source: Path | None = None) -> None:
        self._versions = MappingProxyType(dict(versions))
        self.source = source

    def __getitem__(self, name: str) -> str:
        return self._versions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def version_of(self, name: str) -> str:
        """Version for *name*, or :class:`CatalogError` if it has none."""
        try:
            return self._versions[name]
        except KeyError:
            msg = f"No version for library '{name}' in catalog"
            raise CatalogError(msg, library=name, catalog=str(self.source)) from None

    @classmethod
    def load(cls, path: Path) -> VersionCatalog:
        """Read a TOML catalog of top-level ``name = "version"`` pairs."""
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot read version catalog {path}: {exc}"
            raise CatalogError(msg, catalog=str(path)) from exc
        try:
            data = tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in version catalog {path}: {exc}"
            raise CatalogError(msg, catalog=str(path)) from exc

        bad = sorted(k for k, v in data.items() if not isinstance(v, str))
        if bad:
            msg = f"Catalog versions must be strings: {', '.join(bad)}"
            raise CatalogError(msg, catalog=str(path), keys=bad)
        return cls(data, source=path)


_lock = threading.Lock()
_catalog: VersionCatalog | None = None


def init_catalog(path: Path) -> VersionCatalog:
    """Load the process-wide catalog from *path*.

    Runs once. A repeated call for the same file returns the already
    loaded catalog; a call for a different file is an error, since the
    catalog never changes after load.
    """
    global _catalog
    resolved = path.resolve()
    with _lock:
        if _catalog is not None:
            if _catalog.source == resolved:
                return _catalog
            msg = f"Version catalog already initialized from {_catalog.source}"
            raise CatalogError(msg, catalog=str(resolved))
        _catalog = VersionCatalog.load(resolved)
        logger.debug("Loaded %d catalog versions from %s", len(_catalog), resolved)
        return _catalog


def get_catalog() -> VersionCatalog:
    """Return the loaded catalog. Raises if :func:`init_catalog` never ran."""
    if _catalog is None:
        msg = "Version catalog read before initialization"
        raise CatalogError(msg)
    return _catalog


def _reset_catalog() -> None:
    """Forget the loaded catalog (test isolation only)."""
    global _catalog
    with _lock:
        _catalog = None
