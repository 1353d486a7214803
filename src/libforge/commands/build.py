"""Build commands: install one library, or clean/package/install/publish all."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from libforge.commands._base import LfCommand
from libforge.domain.options import Installer
from libforge.services.build import BuildService

if TYPE_CHECKING:
    from libforge.commands._context import AppContext


@click.command(
    cls=LfCommand,
    examples="""\
  libforge install kit-core
  libforge install kit-sql --publish
  libforge install kit-sql --publish --sign-releases
  libforge --json install kit-redis""",
)
@click.argument("artifact_id")
@click.option("--publish", is_flag=True, help="Publish the target (never its dependencies).")
@click.option("--sign-releases", is_flag=True, help="Sign files uploaded by --publish.")
@click.pass_obj
def install(app: AppContext, artifact_id: str, publish: bool, sign_releases: bool) -> None:
    """Build and install one library after everything it depends on."""
    options = app.options(artifact_id=artifact_id, publish=publish, sign_releases=sign_releases)
    app.emit(BuildService(app.workspace).install_lib(options))


@click.command(
    cls=LfCommand,
    examples="""\
  libforge clean
  libforge --target-dir build clean""",
)
@click.pass_obj
def clean(app: AppContext) -> None:
    """Delete the build output of every library."""
    app.emit(BuildService(app.workspace).clean_libs(app.options()))


@click.command(
    cls=LfCommand,
    examples="""\
  libforge package
  libforge --json package""",
)
@click.pass_obj
def package(app: AppContext) -> None:
    """Package every library in dependency order."""
    app.emit(BuildService(app.workspace).package_libs(app.options()))


@click.command(
    name="install-all",
    cls=LfCommand,
    examples="""\
  libforge package && libforge install-all""",
)
@click.pass_obj
def install_all(app: AppContext) -> None:
    """Install every packaged library into the local repository."""
    app.emit(BuildService(app.workspace).install_libs(app.options()))


@click.command(
    cls=LfCommand,
    examples="""\
  libforge publish
  libforge publish --sign-releases""",
)
@click.option("--sign-releases", is_flag=True, help="Sign every uploaded file.")
@click.pass_obj
def publish(app: AppContext, sign_releases: bool) -> None:
    """Run the full pipeline for every library and publish each one."""
    options = app.options(publish=True, sign_releases=sign_releases)
    app.emit(BuildService(app.workspace).publish_libs(options))


@click.command(
    name="all",
    cls=LfCommand,
    examples="""\
  libforge all
  libforge all --publish
  libforge -v all""",
)
@click.option("--publish", is_flag=True, help="Publish every library after installing it.")
@click.option("--sign-releases", is_flag=True, help="Sign files uploaded by --publish.")
@click.pass_obj
def all_cmd(app: AppContext, publish: bool, sign_releases: bool) -> None:
    """Clean, package and install every library. Optionally publish."""
    options = app.options(publish=publish, sign_releases=sign_releases)
    app.emit(BuildService(app.workspace).build_all(options))


@click.command(
    cls=LfCommand,
    examples="""\
  libforge deploy kit-core
  libforge deploy kit-core --installer remote --sign-releases""",
)
@click.argument("artifact_id")
@click.option(
    "--installer",
    type=click.Choice([i.value for i in Installer]),
    default=Installer.LOCAL.value,
    show_default=True,
    help="Deploy destination.",
)
@click.option("--sign-releases", is_flag=True, help="Sign files uploaded to a remote.")
@click.pass_obj
def deploy(app: AppContext, artifact_id: str, installer: str, sign_releases: bool) -> None:
    """Deploy an already-packaged library to the local or remote repository."""
    options = app.options(
        artifact_id=artifact_id,
        installer=Installer(installer),
        sign_releases=sign_releases,
    )
    app.emit(BuildService(app.workspace).deploy(options))
