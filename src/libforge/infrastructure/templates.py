"""Shared Jinja2 template loading with per-workspace override support."""

from __future__ import annotations

from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader


def build_template_environment(group: str, *, workspace_root: Path | None = None) -> Environment:
    """Build a Jinja2 environment with workspace overrides before packaged defaults.

    Overrides are loaded from ``.libforge/templates/{group}/`` inside the
    workspace, then the shared ``.libforge/templates/`` root.
    """
    loaders: list[BaseLoader] = []
    if workspace_root is not None:
        template_root = workspace_root / ".libforge" / "templates"
        loaders.append(FileSystemLoader([str(template_root / group), str(template_root)]))

    loaders.append(PackageLoader("libforge", f"templates/{group}"))
    return Environment(
        loader=ChoiceLoader(loaders),
        keep_trailing_newline=True,
        autoescape=True,
    )
