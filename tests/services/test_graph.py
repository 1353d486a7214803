"""Tests for GraphService: read-only dependency graph queries."""

from __future__ import annotations

from pathlib import Path

from libforge.infrastructure.workspace import Workspace
from libforge.services.graph import GraphService
from tests.conftest import make_workspace, write_library


class TestListLibraries:
    def test_lists_every_library(self, workspace: Workspace) -> None:
        result = GraphService(workspace).list_libraries()
        assert result.ok
        assert result.data["count"] == 4
        by_name = {item["name"]: item for item in result.data["items"]}
        assert by_name["gamma"] == {"name": "gamma", "version": "1.0.0", "depends_on": ["beta"]}
        assert by_name["delta"]["depends_on"] == []
        assert ".cache" not in by_name

    def test_missing_version_is_warning(self, workspace_root: Path) -> None:
        write_library(workspace_root, "core")
        write_library(workspace_root, "draft", version=None)
        result = GraphService(make_workspace(workspace_root)).list_libraries()
        assert result.ok
        assert result.warnings == ["No catalog version for draft"]

    def test_missing_catalog_fails(self, workspace_root: Path) -> None:
        write_library(workspace_root, "core", version=None)
        result = GraphService(make_workspace(workspace_root)).list_libraries()
        assert not result.ok
        assert result.error.code == "CATALOG_ERROR"


class TestOrder:
    def test_dependencies_first(self, workspace: Workspace) -> None:
        result = GraphService(workspace).order()
        assert result.ok
        assert result.data["order"] == ["alpha", "beta", "gamma", "delta"]

    def test_cycle_fails(self, workspace_root: Path) -> None:
        write_library(workspace_root, "x", deps=["y"])
        write_library(workspace_root, "y", deps=["x"])
        result = GraphService(make_workspace(workspace_root)).order()
        assert not result.ok
        assert result.error.code == "CYCLIC_DEPENDENCY"

    def test_unknown_sibling_fails(self, workspace_root: Path) -> None:
        write_library(workspace_root, "app", deps=["ghost"])
        result = GraphService(make_workspace(workspace_root)).order()
        assert not result.ok
        assert result.error.code == "MANIFEST_ERROR"


class TestDependencies:
    def test_transitive_in_build_order(self, workspace: Workspace) -> None:
        result = GraphService(workspace).dependencies("gamma")
        assert result.ok
        assert result.data["direct"] == ["beta"]
        assert result.data["items"] == ["alpha", "beta"]

    def test_isolated(self, workspace: Workspace) -> None:
        result = GraphService(workspace).dependencies("delta")
        assert result.ok
        assert result.data["items"] == []

    def test_unknown(self, workspace: Workspace) -> None:
        result = GraphService(workspace).dependencies("nope")
        assert not result.ok
        assert result.error.code == "NOT_FOUND"
