"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, libforge.toml only contains
overrides. Most workspaces need only ``[build] group_id``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

# --- libforge.toml sections ---


class LibsConfig(BaseModel):
    """[libs] section."""

    model_config = {"frozen": True}

    dir: str = "libs"
    manifest: str = "deps.yaml"
    hidden_prefix: str = "."


class CatalogConfig(BaseModel):
    """[catalog] section."""

    model_config = {"frozen": True}

    path: str = "libs/versions.toml"


class BuildConfig(BaseModel):
    """[build] section."""

    model_config = {"frozen": True}

    group_id: str = "local"
    target_dir: str = "target"
    source_dirs: list[str] = Field(default_factory=lambda: ["src", "resources"])
    artifact_extension: str = "jar"


class InstallConfig(BaseModel):
    """[install] section."""

    model_config = {"frozen": True}

    local_repository: Path = Field(
        default_factory=lambda: Path.home() / ".libforge" / "repository"
    )


class PublishConfig(BaseModel):
    """[publish] section.

    Credentials are usually supplied through ``LIBFORGE_PUBLISH__USERNAME``
    and ``LIBFORGE_PUBLISH__PASSWORD`` rather than the TOML file.
    """

    model_config = {"frozen": True}

    repository_url: str | None = None
    username: str | None = None
    password: str | None = None
    signing_key: str | None = None
    timeout: float = 60.0


class GitConfig(BaseModel):
    """[git] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    executable: str = "git"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    local_dir: str = ".libforge/plugins"
    sync: bool = True

