"""Operation options shared by every build operation."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class Installer(StrEnum):
    """Destination for a deploy."""

    LOCAL = "local"
    REMOTE = "remote"


class BuildOptions(BaseModel):
    """Recognized options of a build operation.

    Attributes:
        target_dir: Per-library build output directory name; None uses
            ``[build] target_dir``.
        publish: Enable the Publish step where the operation allows it.
        artifact_id: Library selected by single-library operations.
        sign_releases: Sign files uploaded by the Publish step.
        installer: Deploy destination. Publishing always uses ``remote``.
    """

    model_config = {"frozen": True}

    target_dir: str | None = None
    publish: bool = False
    artifact_id: str | None = None
    sign_releases: bool = False
    installer: Installer = Installer.LOCAL
