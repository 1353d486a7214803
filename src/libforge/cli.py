"""Root CLI group for libforge with global flags and command registration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from libforge import __version__
from libforge.commands import register_commands
from libforge.commands._base import LfGroup
from libforge.commands._context import AppContext
from libforge.config.settings import LibforgeSettings


def _section_overrides(*, no_sync: bool, no_git: bool) -> dict[str, Any]:
    """Nested settings overrides for flags that switch off a built-in plugin."""
    overrides: dict[str, Any] = {}
    if no_sync:
        overrides["plugins"] = {"sync": False}
    if no_git:
        overrides["git"] = {"enabled": False}
    return overrides


@click.group(cls=LfGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="libforge")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging and timing spans.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-C",
    "--workspace",
    "workspace_root",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=None,
    help="Workspace root (default: directory of the discovered libforge.toml).",
)
@click.option("--target-dir", default=None, help="Per-library build output directory name.")
@click.option("--no-sync", is_flag=True, help="Leave sibling versions in manifests untouched.")
@click.option("--no-git", is_flag=True, help="Disable the built-in git status provider.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    workspace_root: Path | None,
    target_dir: str | None,
    no_sync: bool,
    no_git: bool,
) -> None:
    """libforge: build, install and publish the libraries of a monorepo."""
    settings = LibforgeSettings.from_cli(
        config_path=config_path,
        workspace_root=workspace_root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        **_section_overrides(no_sync=no_sync, no_git=no_git),
    )
    ctx.obj = AppContext(settings, target_dir=target_dir)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
