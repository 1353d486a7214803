"""LibforgeSettings: one frozen object for every configuration layer.

Layers, strongest first:

* keyword arguments (global CLI flags and ``--no-*`` section overrides);
* ``LIBFORGE_*`` environment variables, ``__`` between section and key
  (``LIBFORGE_PUBLISH__USERNAME``);
* ``libforge.toml``, from ``--config`` or found by :func:`find_config`;
* the defaults in :mod:`libforge.config.models`.

Sections merge key by key, so ``--no-git`` only replaces ``git.enabled``.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from libforge.config.discovery import find_config
from libforge.config.models import (
    BuildConfig,
    CatalogConfig,
    GitConfig,
    InstallConfig,
    LibsConfig,
    PluginsConfig,
    PublishConfig,
)

# pydantic-settings builds its sources inside the constructor, so the file
# chosen by from_cli() reaches settings_customise_sources() through here.
_pending = threading.local()


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; malformed TOML is a usage error, not a traceback."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by an already-located ``libforge.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = read_toml(path) if path is not None else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


def _locate(config_path: str | None, start: Path | None) -> Path | None:
    if config_path is None:
        return find_config(start)
    path = Path(config_path)
    if not path.is_file():
        msg = f"Config file not found: {path}"
        raise click.ClickException(msg)
    return path


class LibforgeSettings(BaseSettings):
    """Resolved configuration, stored on the CLI's ``AppContext``.

    ``workspace_root`` is ``-C`` when given, else the directory holding the
    config file, else the working directory. ``config_path`` is the file
    that was read, if any.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="LIBFORGE_",
        env_nested_delimiter="__",
    )

    workspace_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    libs: LibsConfig = Field(default_factory=LibsConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    install: InstallConfig = Field(default_factory=InstallConfig)
    publish: PublishConfig = Field(default_factory=PublishConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlSettingsSource(settings_cls, getattr(_pending, "path", None))
        return init_settings, env_settings, toml

    @property
    def libs_root(self) -> Path:
        return self.workspace_root / self.libs.dir

    @property
    def catalog_path(self) -> Path:
        return self.workspace_root / self.catalog.path

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        workspace_root: Path | None = None,
        **overrides: Any,
    ) -> LibforgeSettings:
        """Locate the config file, pick the workspace root, and merge *overrides* on top.

        Raises:
            click.ClickException: ``--config`` names a missing file, or the
                TOML does not parse.
        """
        path = _locate(config_path, workspace_root)
        root = workspace_root or (path.parent if path else Path.cwd())
        _pending.path = path
        try:
            return cls(workspace_root=root, config_path=path, **overrides)
        finally:
            _pending.path = None
