"""Command group: dependency graph queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from libforge.commands._base import LfGroup
from libforge.services.graph import GraphService

if TYPE_CHECKING:
    from libforge.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  libforge graph list
  libforge graph order
  libforge graph deps kit-sql
  libforge --json graph order"""


@click.group(cls=LfGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Inspect libraries and their dependencies."""


@graph.command(name="list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List libraries with versions and sibling dependencies."""
    app.emit(GraphService(app.workspace).list_libraries())


@graph.command()
@click.pass_obj
def order(app: AppContext) -> None:
    """Show the build order (dependencies first)."""
    app.emit(GraphService(app.workspace).order())


@graph.command(
    examples="""\
  libforge graph deps kit-sql
  libforge --json graph deps kit-sql"""
)
@click.argument("artifact_id")
@click.pass_obj
def deps(app: AppContext, artifact_id: str) -> None:
    """Show everything a library depends on, directly or transitively."""
    app.emit(GraphService(app.workspace).dependencies(artifact_id))
