"""Dependency manifest reading and sibling-version rewriting.

Manifests are YAML files with a top-level ``deps`` mapping::

    deps:
      io.github.acme/core:
        version: 0.4.1
      org.yaml/snakeyaml:
        version: "2.2"

Only coordinates owned by the workspace ``group_id`` are siblings.
Rewrites go through a round-trip parser so comments and quoting survive.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from io import StringIO
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from libforge.domain.coordinates import Coordinate, LibraryId, owned_by
from libforge.errors import ManifestParseError

logger = logging.getLogger(__name__)

DEPS_KEY = "deps"


def _new_yaml() -> YAML:
    """Fresh round-trip parser per call (ruamel's YAML object is stateful)."""
    y = YAML()
    y.preserve_quotes = True
    y.default_flow_style = False
    return y


def _load(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read dependency manifest {path}: {exc}"
        raise ManifestParseError(msg, manifest=str(path)) from exc
    try:
        return _new_yaml().load(raw)
    except YAMLError as exc:
        msg = f"Invalid YAML in dependency manifest {path}: {exc}"
        raise ManifestParseError(msg, manifest=str(path)) from exc


def _deps_section(data: Any, path: Path) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        msg = f"Dependency manifest {path} must be a mapping"
        raise ManifestParseError(msg, manifest=str(path))
    deps = data.get(DEPS_KEY)
    if deps is None:
        return {}
    if not isinstance(deps, Mapping):
        msg = f"'{DEPS_KEY}' in {path} must map coordinates to specs"
        raise ManifestParseError(msg, manifest=str(path))
    return deps


def _coordinate(key: Any, path: Path) -> Coordinate:
    try:
        return Coordinate.parse(str(key))
    except ValueError as exc:
        raise ManifestParseError(str(exc), manifest=str(path)) from exc


def read_manifest(path: Path) -> dict[Coordinate, Any]:
    """Parse *path* into ``{Coordinate: spec}``.

    Raises:
        ManifestParseError: missing file, invalid YAML, bad structure,
            or an unparseable coordinate.
    """
    deps = _deps_section(_load(path), path)
    result: dict[Coordinate, Any] = {}
    for key, spec in deps.items():
        result[_coordinate(key, path)] = spec
    return result


def sibling_dependencies(
    path: Path,
    *,
    group_id: str,
    libraries: Iterable[LibraryId],
) -> set[LibraryId]:
    """Library ids that the manifest at *path* depends on within the workspace.

    Raises:
        ManifestParseError: a group-owned coordinate names no known library.
    """
    known = set(libraries)
    siblings: set[LibraryId] = set()
    for coord in owned_by(read_manifest(path), group_id):
        if coord.name not in known:
            msg = f"{path} depends on unknown sibling library '{coord}'"
            raise ManifestParseError(msg, manifest=str(path), coordinate=str(coord))
        siblings.add(coord.name)
    return siblings


def sync_sibling_versions(path: Path, *, group_id: str, versions: Mapping[str, str]) -> bool:
    """Rewrite the ``version`` of every sibling coordinate to *versions*.

    Only specs that are mappings are touched. Returns True if the file
    changed on disk.
    """
    data = _load(path)
    deps = _deps_section(data, path)
    changed = False
    for key, spec in deps.items():
        coord = _coordinate(key, path)
        if not coord.is_owned_by(group_id) or not isinstance(spec, dict):
            continue
        wanted = versions.get(coord.name)
        if wanted is not None and str(spec.get("version")) != wanted:
            logger.debug("Sync %s: %s %s -> %s", path, coord, spec.get("version"), wanted)
            spec["version"] = wanted
            changed = True

    if changed:
        buf = StringIO()
        _new_yaml().dump(data, buf)
        try:
            path.write_text(buf.getvalue(), encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot write dependency manifest {path}: {exc}"
            raise ManifestParseError(msg, manifest=str(path)) from exc
    return changed
