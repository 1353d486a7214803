"""Shared pytest fixtures and test helpers for libforge tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pluggy
import pytest
from click.testing import CliRunner

from libforge.config.settings import LibforgeSettings
from libforge.domain.catalog import _reset_catalog
from libforge.domain.status import StatusEntry
from libforge.infrastructure.workspace import Workspace
from libforge.services.telemetry import disable_telemetry

GROUP_ID = "io.github.acme"

hookimpl = pluggy.HookimplMarker("libforge")


# ---------------------------------------------------------------------------
# Test plugins
# ---------------------------------------------------------------------------


class FakeStatusPlugin:
    """Working-tree status provider returning canned entries."""

    def __init__(self, entries: list[StatusEntry] | None = None) -> None:
        self.entries = entries or []
        self.calls = 0

    @hookimpl
    def working_tree_status(self, root: Path) -> list[StatusEntry]:
        self.calls += 1
        return list(self.entries)


class RecordingPlugin:
    """Records every lifecycle notification as ``(hook, library)``."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    @hookimpl
    def post_clean(self, library: str, target_dir: str) -> None:
        self.events.append(("clean", library))

    @hookimpl
    def post_package(self, library: str, version: str, artifact: str) -> None:
        self.events.append(("package", library))

    @hookimpl
    def post_install(self, library: str, version: str, location: str) -> None:
        self.events.append(("install", library))

    @hookimpl
    def post_publish(self, library: str, version: str, locations: list[str]) -> None:
        self.events.append(("publish", library))

    def libraries(self, hook: str) -> list[str]:
        return [lib for name, lib in self.events if name == hook]


# ---------------------------------------------------------------------------
# Workspace layout helpers
# ---------------------------------------------------------------------------


def write_library(
    root: Path,
    name: str,
    *,
    deps: list[str] | None = None,
    external: dict[str, str] | None = None,
    version: str | None = "1.0.0",
) -> Path:
    """Create ``libs/{name}`` with a manifest, a source file, and a catalog entry.

    *deps* are sibling library names; *external* maps third-party
    coordinates to versions.
    """
    lib_dir = root / "libs" / name
    (lib_dir / "src" / name).mkdir(parents=True, exist_ok=True)
    (lib_dir / "src" / name / "core.py").write_text(f"NAME = {name!r}\n", encoding="utf-8")

    lines = ["deps:"]
    for dep in deps or []:
        lines += [f"  {GROUP_ID}/{dep}:", "    version: 0.0.1"]
    for coord, ver in (external or {}).items():
        lines += [f"  {coord}:", f'    version: "{ver}"']
    if len(lines) == 1:
        lines = ["deps: {}"]
    (lib_dir / "deps.yaml").write_text("\n".join(lines) + "\n", encoding="utf-8")

    if version is not None:
        catalog = root / "libs" / "versions.toml"
        existing = catalog.read_text(encoding="utf-8") if catalog.exists() else ""
        catalog.write_text(existing + f'{name} = "{version}"\n', encoding="utf-8")
    return lib_dir


def make_settings(root: Path, **cli_flags: object) -> LibforgeSettings:
    return LibforgeSettings.from_cli(workspace_root=root, **cli_flags)


def make_workspace(
    root: Path,
    *,
    status: FakeStatusPlugin | None = None,
    recorder: RecordingPlugin | None = None,
) -> Workspace:
    """Workspace on *root* with fake status and optional recorder plugins."""
    ws = Workspace(make_settings(root))
    ws.plugins.register_plugin(status or FakeStatusPlugin(), name="fake-status")
    if recorder is not None:
        ws.plugins.register_plugin(recorder, name="recorder")
    return ws


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _fresh_catalog() -> Iterator[None]:
    """Each test loads its own version catalog."""
    _reset_catalog()
    yield
    _reset_catalog()


@pytest.fixture(autouse=True)
def _telemetry_off() -> Iterator[None]:
    """`-v` enables telemetry for the whole context; switch it back off."""
    yield
    disable_telemetry()


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LIBFORGE_CONFIG", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Workspace with config, empty libs root, and local/remote repositories.

    Git status is disabled in config; tests register a fake provider.
    """
    root = tmp_path / "ws"
    (root / "libs").mkdir(parents=True)
    (root / "libforge.toml").write_text(
        "\n".join(
            [
                "[build]",
                f'group_id = "{GROUP_ID}"',
                "[install]",
                f'local_repository = "{(tmp_path / "m2").as_posix()}"',
                "[publish]",
                f'repository_url = "{(tmp_path / "remote").as_posix()}"',
                "[git]",
                "enabled = false",
                "",
            ]
        ),
        encoding="utf-8",
    )
    return root


@pytest.fixture
def chain_root(workspace_root: Path) -> Path:
    """A <- B <- C chain plus isolated D, and one hidden directory."""
    write_library(workspace_root, "alpha", external={"org.yaml/snakeyaml": "2.2"})
    write_library(workspace_root, "beta", deps=["alpha"])
    write_library(workspace_root, "gamma", deps=["beta"])
    write_library(workspace_root, "delta")
    (workspace_root / "libs" / ".cache").mkdir()
    return workspace_root


@pytest.fixture
def status() -> FakeStatusPlugin:
    return FakeStatusPlugin()


@pytest.fixture
def recorder() -> RecordingPlugin:
    return RecordingPlugin()


@pytest.fixture
def workspace(
    chain_root: Path, status: FakeStatusPlugin, recorder: RecordingPlugin
) -> Workspace:
    return make_workspace(chain_root, status=status, recorder=recorder)


@pytest.fixture
def _in_chain_root(chain_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the chain workspace so the CLI discovers its config."""
    monkeypatch.chdir(chain_root)
