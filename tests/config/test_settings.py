"""Tests for LibforgeSettings: unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from libforge.config.settings import LibforgeSettings


class TestLibforgeSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = LibforgeSettings.from_cli(workspace_root=tmp_path)
        assert settings.workspace_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.build.group_id == "local"
        assert settings.libs.manifest == "deps.yaml"
        assert settings.git.enabled is True
        assert settings.libs_root == tmp_path / "libs"
        assert settings.catalog_path == tmp_path / "libs" / "versions.toml"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = LibforgeSettings.from_cli(workspace_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "libforge.toml").write_text(
            '[build]\ngroup_id = "io.github.acme"\n[libs]\ndir = "modules"\n'
        )
        settings = LibforgeSettings.from_cli(workspace_root=tmp_path)
        assert settings.build.group_id == "io.github.acme"
        assert settings.build.target_dir == "target"  # default preserved
        assert settings.libs_root == tmp_path / "modules"

    def test_empty_toml_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "libforge.toml").write_text("")
        settings = LibforgeSettings.from_cli(workspace_root=tmp_path)
        assert settings.build.group_id == "local"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[publish]\nrepository_url = "https://repo.example.com"\n')
        settings = LibforgeSettings.from_cli(config_path=str(custom), workspace_root=tmp_path)
        assert settings.publish.repository_url == "https://repo.example.com"
        assert settings.config_path == custom

    def test_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "libforge.toml").write_text("")
        nested = tmp_path / "libs" / "core"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = LibforgeSettings.from_cli()
        assert settings.workspace_root == tmp_path.resolve()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "libforge.toml").write_text("[build\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            LibforgeSettings.from_cli(workspace_root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "libforge.toml").write_text('[publish]\nusername = "from-toml"\n')
        monkeypatch.setenv("LIBFORGE_PUBLISH__USERNAME", "from-env")
        settings = LibforgeSettings.from_cli(workspace_root=tmp_path)
        assert settings.publish.username == "from-env"

    def test_cli_flags_override_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LIBFORGE_VERBOSE", "false")
        settings = LibforgeSettings.from_cli(workspace_root=tmp_path, verbose=True)
        assert settings.verbose is True

    def test_section_override_merges_with_toml(self, tmp_path: Path) -> None:
        (tmp_path / "libforge.toml").write_text('[git]\nexecutable = "/opt/git"\n')
        settings = LibforgeSettings.from_cli(workspace_root=tmp_path, git={"enabled": False})
        assert settings.git.enabled is False
        assert settings.git.executable == "/opt/git"


class TestExplicitConfig:
    def test_missing_file_is_usage_error(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            LibforgeSettings.from_cli(config_path=str(tmp_path / "nope.toml"))
