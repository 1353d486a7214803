"""Tests for the Packager: clean, descriptor rendering, and archiving."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from libforge.domain.coordinates import Coordinate
from libforge.domain.descriptor import build_descriptor
from libforge.errors import PackagingError
from libforge.infrastructure.packaging import Packager

from tests.conftest import GROUP_ID, write_library


@pytest.fixture
def lib_root(tmp_path: Path) -> Path:
    write_library(tmp_path, "core", external={"org.yaml/snakeyaml": "2.2"})
    (tmp_path / "libs" / "core" / "resources").mkdir()
    (tmp_path / "libs" / "core" / "resources" / "defaults.yaml").write_text(
        "a: 1\n", encoding="utf-8"
    )
    return tmp_path


def _bd(root: Path, version: str = "1.0.0"):
    return build_descriptor("core", libs_root=root / "libs", group=GROUP_ID, version=version)


_DEPS = {
    Coordinate(group="org.yaml", name="snakeyaml"): {"version": "2.2"},
    Coordinate(name="pyyaml"): {},
}


class TestRenderDescriptor:
    def test_coordinates_and_dependencies(self, lib_root: Path) -> None:
        xml = Packager().render_descriptor(_bd(lib_root), _DEPS)
        assert f"<groupId>{GROUP_ID}</groupId>" in xml
        assert "<artifactId>core</artifactId>" in xml
        assert "<version>1.0.0</version>" in xml
        assert "<packaging>jar</packaging>" in xml
        assert "<artifactId>snakeyaml</artifactId>" in xml
        assert "<version>2.2</version>" in xml
        # unqualified coordinates reuse their name as group
        assert "<groupId>pyyaml</groupId>" in xml

    def test_no_dependencies_block_when_empty(self, lib_root: Path) -> None:
        xml = Packager().render_descriptor(_bd(lib_root), {})
        assert "<dependencies>" not in xml

    def test_workspace_override(self, lib_root: Path) -> None:
        override = lib_root / ".libforge" / "templates" / "descriptor"
        override.mkdir(parents=True)
        (override / "pom.xml.j2").write_text("custom {{ name }}-{{ version }}\n", encoding="utf-8")
        xml = Packager(workspace_root=lib_root).render_descriptor(_bd(lib_root), {})
        assert xml == "custom core-1.0.0\n"


class TestPackage:
    def test_archive_contents(self, lib_root: Path) -> None:
        bd = _bd(lib_root)
        artifact = Packager().package(bd, _DEPS)
        assert artifact == bd.artifact_file
        assert artifact.name == "core-1.0.0.jar"
        with zipfile.ZipFile(artifact) as zf:
            names = set(zf.namelist())
        assert "core/core.py" in names
        assert "defaults.yaml" in names
        assert f"META-INF/maven/{GROUP_ID}/core/pom.xml" in names

    def test_same_version_same_path(self, lib_root: Path) -> None:
        first = Packager().package(_bd(lib_root), {})
        second = Packager().package(_bd(lib_root), {})
        assert first == second

    def test_filesystem_failure(self, lib_root: Path) -> None:
        bd = _bd(lib_root)
        # a file where the target directory should be
        bd.target_dir.write_text("not a directory", encoding="utf-8")
        with pytest.raises(PackagingError) as exc_info:
            Packager().package(bd, {})
        assert exc_info.value.detail["library"] == "core"


class TestClean:
    def test_removes_target(self, lib_root: Path) -> None:
        bd = _bd(lib_root)
        Packager().package(bd, {})
        assert Packager().clean(bd) is True
        assert not bd.target_dir.exists()
        assert (bd.lib_dir / "deps.yaml").exists()

    def test_nothing_to_clean(self, lib_root: Path) -> None:
        assert Packager().clean(_bd(lib_root)) is False

    def test_removal_failure(self, lib_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        bd = _bd(lib_root)
        Packager().package(bd, {})

        def _refuse(path: Path) -> None:
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr("libforge.infrastructure.packaging.shutil.rmtree", _refuse)
        with pytest.raises(PackagingError, match="Cleaning core failed"):
            Packager().clean(bd)
