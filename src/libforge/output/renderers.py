"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from libforge.output.console import create_console, get_output, style_for_state

if TYPE_CHECKING:
    from rich.console import Console

    from libforge.services.result import ServiceResult

type _Renderer = Callable[..., None]


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        return f"ERROR: {result.op} — {result.message}"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="lf.ok"), Text(f"  {result.op}", style="lf.op"))


def _field(console: Console, key: str, value: Any) -> None:
    style = "lf.lib" if key == "artifact_id" else ""
    console.print(Text(f"  {key}: ", style="lf.key"), Text(str(value), style=style))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta or "telemetry" not in result.meta:
        return
    console.print()
    console.print(Text("  telemetry:", style="dim"))
    _render_span(console, result.meta["telemetry"], indent=4)


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    duration = span.get("duration_ms", 0.0)
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"
    console.print(f"{' ' * indent}[{style}]{duration:>8.2f}ms[/{style}]  {span.get('name', '?')}")
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


def _library_table(libraries: list[dict[str, Any]]) -> Table:
    """One row per library report entry; columns follow the entry keys."""
    columns = ("library", "version", "state", "artifact", "location", "target_dir")
    present = [c for c in columns if any(c in entry for entry in libraries)]
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    for col in present:
        style = "lf.lib" if col == "library" else None
        table.add_column(col.replace("_", " ").title(), style=style)
    for entry in libraries:
        row: list[Text | str] = []
        for col in present:
            value = str(entry.get(col, ""))
            row.append(Text(value, style=style_for_state(value)) if col == "state" else value)
        table.add_row(*row)
    return table


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    console.print(
        Text("ERROR", style="lf.error"),
        Text(f"  {result.op}", style="lf.op"),
        " — ",
        result.message,
    )
    if err and err.detail:
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")
    if result.libraries:
        console.print(_library_table(result.libraries))


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    if "artifact_id" in result.data:
        _field(console, "artifact_id", result.data["artifact_id"])
    libraries = result.libraries
    _field(console, "count", len(libraries))
    if libraries:
        console.print(_library_table(libraries))
    if verbose:
        _render_meta(console, result)


def _render_order(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for i, lib in enumerate(result.data.get("order", []), start=1):
        console.print(f"  {i:>3}. ", Text(lib, style="lf.lib"))
    if verbose:
        _render_meta(console, result)


def _render_dependencies(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "artifact_id", result.data["artifact_id"])
    _field(console, "direct", ", ".join(result.data.get("direct", [])) or "-")
    _field(console, "transitive", ", ".join(result.data.get("items", [])) or "-")
    if verbose:
        _render_meta(console, result)


def _render_libraries(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Library", style="lf.lib", no_wrap=True)
    table.add_column("Version", style="lf.version")
    table.add_column("Depends On")
    for item in result.data.get("items", []):
        table.add_row(item["name"], str(item["version"] or "?"), ", ".join(item["depends_on"]))
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, _Renderer] = {
    # Build
    "install_lib": _render_build,
    "clean_libs": _render_build,
    "package_libs": _render_build,
    "install_libs": _render_build,
    "publish_libs": _render_build,
    "build_all": _render_build,
    # Graph
    "order": _render_order,
    "dependencies": _render_dependencies,
    "list_libraries": _render_libraries,
}
