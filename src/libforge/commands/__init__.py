"""Subcommand modules for libforge.

Provides register_commands() which uses deferred imports to keep
``libforge --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the graph group and the build commands on the root group."""
    from libforge.commands.build import (
        all_cmd,
        clean,
        deploy,
        install,
        install_all,
        package,
        publish,
    )
    from libforge.commands.graph import graph

    cli.add_command(graph)

    cli.add_command(install)
    cli.add_command(clean)
    cli.add_command(package)
    cli.add_command(install_all)
    cli.add_command(publish)
    cli.add_command(all_cmd)
    cli.add_command(deploy)
