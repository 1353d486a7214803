"""Artifact stores: local repository install and remote publish.

Both stores use the Maven repository layout keyed by ``(name, version)``::

    {root}/{group with . -> /}/{name}/{version}/{name}-{version}.{ext}
    {root}/{group with . -> /}/{name}/{version}/{name}-{version}.pom

Remote targets are either a directory (plain path or ``file://`` URL) or an
``http(s)://`` repository that accepts PUT uploads.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

import requests

from libforge.config.models import PublishConfig
from libforge.domain.descriptor import BuildDescriptor
from libforge.errors import ArtifactMissingError, InstallError, PublishError

logger = logging.getLogger(__name__)


def repository_path(bd: BuildDescriptor) -> PurePosixPath:
    """Relative directory for *bd* inside a Maven-layout repository."""
    return PurePosixPath(*bd.group.split("."), bd.name, bd.version)


def deployable_files(bd: BuildDescriptor) -> list[tuple[Path, str]]:
    """``(local file, repository file name)`` pairs for *bd*.

    Raises:
        ArtifactMissingError: the library has not been packaged.
    """
    missing = [p for p in (bd.artifact_file, bd.descriptor_file) if not p.is_file()]
    if missing:
        msg = f"{bd.name} {bd.version} is not packaged: missing {', '.join(map(str, missing))}"
        raise ArtifactMissingError(msg, library=bd.name)
    stem = f"{bd.name}-{bd.version}"
    return [
        (bd.artifact_file, bd.artifact_file.name),
        (bd.descriptor_file, f"{stem}.pom"),
    ]


class LocalArtifactStore:
    """Filesystem repository on this machine."""

    def __init__(self, root: Path) -> None:
        self.root = root.expanduser()

    def location(self, bd: BuildDescriptor) -> Path:
        return self.root / repository_path(bd)

    def install(self, bd: BuildDescriptor) -> Path:
        """Copy artifact and descriptor into the repository. Returns the artifact path.

        Raises:
            ArtifactMissingError: the library has not been packaged.
            InstallError: the repository directory could not be written.
        """
        files = deployable_files(bd)
        dest = self.location(bd)
        try:
            dest.mkdir(parents=True, exist_ok=True)
            for src, name in files:
                shutil.copy2(src, dest / name)
        except OSError as exc:
            msg = f"Install of {bd.name} into {self.root} failed: {exc}"
            raise InstallError(msg, library=bd.name, destination=str(dest)) from exc
        logger.info("Installed %s to %s", bd.artifact_file.name, dest)
        return dest / bd.artifact_file.name


def sign_file(path: Path, *, key: str | None = None) -> Path:
    """Create a detached ASCII-armored signature ``{path}.asc`` with gpg."""
    args = ["gpg", "--batch", "--yes", "--armor", "--detach-sign"]
    if key:
        args += ["--local-user", key]
    try:
        subprocess.run([*args, str(path)], capture_output=True, text=True, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        detail = getattr(exc, "stderr", None) or str(exc)
        msg = f"Signing {path.name} failed: {detail.strip()}"
        raise PublishError(msg, file=str(path)) from exc
    return path.with_name(f"{path.name}.asc")


class RemoteArtifactStore:
    """Remote repository reached by directory copy or HTTP PUT."""

    def __init__(self, config: PublishConfig, *, session: requests.Session | None = None) -> None:
        self._config = config
        self._session = session

    @property
    def url(self) -> str:
        if not self._config.repository_url:
            msg = "No remote repository configured ([publish] repository_url)"
            raise PublishError(msg)
        return self._config.repository_url.rstrip("/")

    def publish(self, bd: BuildDescriptor, *, sign_releases: bool = False) -> list[str]:
        """Upload artifact, descriptor and optional signatures.

        Returns the remote locations written.

        Raises:
            ArtifactMissingError: the library has not been packaged.
            PublishError: no repository configured, signing, or upload failed.
        """
        files = deployable_files(bd)
        if sign_releases:
            files += [
                (sign_file(src, key=self._config.signing_key), f"{name}.asc") for src, name in files
            ]

        base = self.url
        rel = repository_path(bd)
        parsed = urlparse(base)
        if parsed.scheme in ("http", "https"):
            return [self._put(f"{base}/{rel}/{name}", src) for src, name in files]
        root = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(base)
        return [self._copy(src, root / rel / name) for src, name in files]

    def _copy(self, src: Path, dest: Path) -> str:
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dest)
        except OSError as exc:
            msg = f"Copy to remote repository failed: {exc}"
            raise PublishError(msg, destination=str(dest)) from exc
        logger.info("Published %s", dest)
        return str(dest)

    def _put(self, url: str, src: Path) -> str:
        auth = None
        if self._config.username:
            auth = (self._config.username, self._config.password or "")
        http = self._session or requests
        try:
            with src.open("rb") as fh:
                response = http.put(url, data=fh, auth=auth, timeout=self._config.timeout)
            response.raise_for_status()
        except (OSError, requests.RequestException) as exc:
            msg = f"Upload of {src.name} failed: {exc}"
            raise PublishError(msg, url=url) from exc
        logger.info("Published %s", url)
        return url
