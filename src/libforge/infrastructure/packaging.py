"""Packager: clean, descriptor rendering, and artifact archiving.

The artifact is a zip archive of ``class_dir``: copied source and resource
trees plus the rendered descriptor under ``META-INF``.
"""

from __future__ import annotations

import logging
import shutil
import zipfile
from pathlib import Path
from typing import Any

from libforge.domain.coordinates import Coordinate
from libforge.domain.descriptor import DESCRIPTOR_FILENAME, BuildDescriptor
from libforge.errors import PackagingError
from libforge.infrastructure.templates import build_template_environment

logger = logging.getLogger(__name__)

_TEMPLATE_NAME = f"{DESCRIPTOR_FILENAME}.j2"


def _dependency_entries(deps: dict[Coordinate, Any]) -> list[dict[str, str | None]]:
    """Flatten manifest deps for the descriptor template.

    Unqualified coordinates use their name as group, the usual convention
    for single-segment artifact names.
    """
    entries: list[dict[str, str | None]] = []
    for coord, spec in sorted(deps.items(), key=lambda kv: str(kv[0])):
        version = spec.get("version") if isinstance(spec, dict) else None
        entries.append(
            {
                "group": coord.group or coord.name,
                "name": coord.name,
                "version": None if version is None else str(version),
            }
        )
    return entries


class Packager:
    """Produces build outputs for a :class:`BuildDescriptor`."""

    def __init__(self, *, workspace_root: Path | None = None) -> None:
        self._env = build_template_environment("descriptor", workspace_root=workspace_root)

    def clean(self, bd: BuildDescriptor) -> bool:
        """Delete the library's target directory. Returns True if it existed.

        Raises:
            PackagingError: the directory could not be removed.
        """
        if not bd.target_dir.exists():
            return False
        logger.info("Cleaning %s", bd.target_dir)
        try:
            shutil.rmtree(bd.target_dir)
        except OSError as exc:
            msg = f"Cleaning {bd.name} failed: {exc}"
            raise PackagingError(msg, library=bd.name) from exc
        return True

    def render_descriptor(self, bd: BuildDescriptor, deps: dict[Coordinate, Any]) -> str:
        template = self._env.get_template(_TEMPLATE_NAME)
        return template.render(
            group=bd.group,
            name=bd.name,
            version=bd.version,
            packaging=bd.extension,
            dependencies=_dependency_entries(deps),
        )

    def write_descriptor(self, bd: BuildDescriptor, deps: dict[Coordinate, Any]) -> Path:
        bd.descriptor_file.parent.mkdir(parents=True, exist_ok=True)
        bd.descriptor_file.write_text(self.render_descriptor(bd, deps), encoding="utf-8")
        return bd.descriptor_file

    def package(self, bd: BuildDescriptor, deps: dict[Coordinate, Any]) -> Path:
        """Write the descriptor, copy sources, and zip ``class_dir``.

        Raises:
            PackagingError: on any filesystem failure.
        """
        try:
            self.write_descriptor(bd, deps)
            for src in bd.source_dirs:
                if src.is_dir():
                    shutil.copytree(src, bd.class_dir, dirs_exist_ok=True)
            bd.artifact_file.parent.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(bd.artifact_file, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for path in sorted(bd.class_dir.rglob("*")):
                    if path.is_file():
                        zf.write(path, path.relative_to(bd.class_dir).as_posix())
        except OSError as exc:
            msg = f"Packaging {bd.name} failed: {exc}"
            raise PackagingError(msg, library=bd.name) from exc
        logger.info("Packaged %s", bd.artifact_file)
        return bd.artifact_file
