"""BuildDescriptor: per-library paths derived from name and version.

Descriptors are never persisted. They are rebuilt from the library id and
the version catalog whenever needed, so the artifact path for a given
``(name, version)`` is always the same.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

DESCRIPTOR_FILENAME = "pom.xml"


class BuildDescriptor(BaseModel):
    """Derived build data for a single library."""

    model_config = {"frozen": True}

    name: str
    group: str
    version: str
    lib_dir: Path
    source_dirs: tuple[Path, ...]
    target_dir: Path
    class_dir: Path
    descriptor_file: Path
    artifact_file: Path

    @property
    def extension(self) -> str:
        return self.artifact_file.suffix.lstrip(".")


def artifact_filename(name: str, version: str, extension: str) -> str:
    """``{name}-{version}.{ext}``."""
    return f"{name}-{version}.{extension}"


def build_descriptor(
    name: str,
    *,
    libs_root: Path,
    group: str,
    version: str,
    target_dir: str = "target",
    source_dirs: tuple[str, ...] = ("src", "resources"),
    extension: str = "jar",
) -> BuildDescriptor:
    """Derive the build descriptor for library *name*.

    Layout::

        {libs_root}/{name}/{target_dir}/{name}-{version}.{ext}
        {libs_root}/{name}/{target_dir}/classes/META-INF/maven/{group}/{name}/pom.xml
    """
    lib_dir = libs_root / name
    target = lib_dir / target_dir
    class_dir = target / "classes"
    return BuildDescriptor(
        name=name,
        group=group,
        version=version,
        lib_dir=lib_dir,
        source_dirs=tuple(lib_dir / d for d in source_dirs),
        target_dir=target,
        class_dir=class_dir,
        descriptor_file=class_dir / "META-INF" / "maven" / group / name / DESCRIPTOR_FILENAME,
        artifact_file=target / artifact_filename(name, version, extension),
    )
