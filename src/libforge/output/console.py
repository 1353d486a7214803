"""Rich theme and buffered consoles for human-readable output.

Renderers print into an in-memory console and hand back the text, so
``format_result`` stays a pure ``ServiceResult -> str`` function. Rich
drops ANSI codes on its own when the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

from libforge.domain.pipeline import PipelineState

DEFAULT_WIDTH = 120

# Only outcomes are coloured; intermediate states print plain.
_STATE_COLOURS: dict[PipelineState, str] = {
    PipelineState.PUBLISHED: "bold green",
    PipelineState.SKIPPED: "green",
    PipelineState.ABORTED: "bold red",
}

LIBFORGE_THEME = Theme(
    {
        "lf.ok": "bold green",
        "lf.error": "bold red",
        "lf.warning": "bold yellow",
        "lf.op": "bold cyan",
        "lf.key": "dim",
        "lf.lib": "bold blue",
        "lf.path": "dim",
        "lf.version": "magenta",
        **{f"lf.state.{state}": colour for state, colour in _STATE_COLOURS.items()},
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=LIBFORGE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Everything printed so far to a console from :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console is not buffered")
    return buffer.getvalue()


def style_for_state(state: str) -> str:
    """Theme style for a pipeline state, or ``""`` for intermediate states."""
    if state in {s.value for s in _STATE_COLOURS}:
        return f"lf.state.{state}"
    return ""
