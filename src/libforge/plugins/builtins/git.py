"""Built-in Git plugin: working-tree status for the publish gate.

Runs ``git status --porcelain=v1`` at the workspace root. Unlike
notification plugins, failures here are fatal: a publish must never pass
the gate because git could not be asked.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

import pluggy

from libforge.config.models import GitConfig
from libforge.domain.status import StatusEntry, parse_porcelain
from libforge.errors import VersionControlError

hookimpl = pluggy.HookimplMarker("libforge")

logger = logging.getLogger(__name__)


class GitPlugin:
    """Working-tree status provider backed by the git CLI."""

    def __init__(self, config: GitConfig | None = None) -> None:
        self._config = config or GitConfig()

    @hookimpl
    def working_tree_status(self, root: Path) -> list[StatusEntry] | None:
        """Status entries for *root*, or None when the plugin is disabled."""
        if not self._config.enabled:
            return None
        return parse_porcelain(self._git_status(root))

    def _run_git(self, root: Path, *args: str) -> subprocess.CompletedProcess[str]:
        """Run a git command in *root*. Raises on a non-zero exit."""
        return subprocess.run(
            [self._config.executable, *args],
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        )

    def _git_status(self, root: Path) -> str:
        try:
            result = self._run_git(root, "status", "--porcelain=v1")
        except (OSError, subprocess.CalledProcessError) as exc:
            detail = getattr(exc, "stderr", None) or str(exc)
            msg = f"git status failed: {detail.strip()}"
            raise VersionControlError(msg, root=str(root)) from exc
        if result.stderr.strip():
            msg = f"git status reported: {result.stderr.strip()}"
            raise VersionControlError(msg, root=str(root))
        logger.debug("git status: %d lines", len(result.stdout.splitlines()))
        return result.stdout
