"""Tests for --examples flag on CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from libforge.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["install", "--examples"], ["libforge install kit-core", "--publish --sign-releases"]),
    (["clean", "--examples"], ["--target-dir build clean"]),
    (["package", "--examples"], ["libforge package"]),
    (["install-all", "--examples"], ["libforge install-all"]),
    (["publish", "--examples"], ["libforge publish --sign-releases"]),
    (["all", "--examples"], ["libforge all --publish"]),
    (["deploy", "--examples"], ["--installer remote"]),
    (["graph", "--examples"], ["libforge graph order", "libforge graph deps kit-sql"]),
    (["graph", "deps", "--examples"], ["--json graph deps"]),
]


def _examples_id(item: tuple[list[str], list[str]]) -> str:
    """Generate a readable test ID from args."""
    args, _ = item
    return "_".join(a for a in args if a != "--examples")


@pytest.mark.parametrize(
    "args,expected_keywords",
    EXAMPLES_COMMANDS,
    ids=[_examples_id(item) for item in EXAMPLES_COMMANDS],
)
def test_examples_flag(
    cli_runner: CliRunner, args: list[str], expected_keywords: list[str]
) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    for kw in expected_keywords:
        assert kw in result.output, f"Expected '{kw}' in examples output for {args}"


class TestExamplesInHelp:
    """``--examples`` is listed only for commands that define examples."""

    @pytest.mark.parametrize("args", [["install", "--help"], ["graph", "--help"]])
    def test_listed(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert "--examples" in result.output

    def test_absent_without_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["graph", "order", "--help"])
        assert "--examples" not in result.output
