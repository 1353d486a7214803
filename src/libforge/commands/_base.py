"""Click base classes for libforge commands.

Commands and groups may carry an ``examples`` block. It is kept out of
``--help`` and printed by an eager ``--examples`` flag instead, with a one
line pointer in the help epilog.
"""

from __future__ import annotations

from typing import Any

import click

_EXAMPLES_HINT = "Run with --examples for usage examples."


def examples_option(examples: str) -> click.Option:
    """Eager ``--examples`` flag that prints *examples* and exits."""

    def _show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples.rstrip("\n"))
        ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_show,
        help="Show usage examples and exit.",
    )


class _ExamplesMixin:
    """Adds the ``examples`` keyword to a Click command class."""

    params: list[click.Parameter]
    epilog: str | None

    def _attach_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        self.params.append(examples_option(examples))
        self.epilog = f"{self.epilog}\n\n{_EXAMPLES_HINT}" if self.epilog else _EXAMPLES_HINT


class LfCommand(_ExamplesMixin, click.Command):
    """Command with optional ``--examples``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)


class LfGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are :class:`LfCommand` unless stated otherwise."""

    command_class = LfCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)
