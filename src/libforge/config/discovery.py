"""Locate ``libforge.toml``.

The search walks up from the starting directory like git looks for
``.git``, but never past the root of the repository that contains the
start: a directory holding ``.git`` is the last one checked.
``LIBFORGE_CONFIG`` (a file, or a directory containing the file) takes
precedence over the walk.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "libforge.toml"
CONFIG_ENV_VAR = "LIBFORGE_CONFIG"
REPOSITORY_MARKER = ".git"


def _from_env() -> Path | None:
    raw = os.environ.get(CONFIG_ENV_VAR)
    if not raw:
        return None
    path = Path(raw).expanduser()
    if path.is_dir():
        path = path / CONFIG_FILENAME
    return path if path.is_file() else None


def find_config(start: Path | None = None) -> Path | None:
    """Path of the config file in effect for *start* (default: cwd), or None."""
    if os.environ.get(CONFIG_ENV_VAR):
        return _from_env()

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if (directory / REPOSITORY_MARKER).exists():
            break
    return None
