"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich tables) or machines
(--json).  Renderers are dispatched by ``result.op``; unknown ops fall
through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from sketchctx.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from sketchctx.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """How a result should be rendered."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2, exclude_none=True)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: IDs for list results, status line otherwise."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    rows = result.data.get("components") or result.data.get("selectedNodes") or result.data.get("tools")
    if isinstance(rows, list):
        return "\n".join(_row_id(row) for row in rows if _row_id(row))
    return f"OK: {result.op}"


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console, verbose=verbose)
    for warning in result.warnings:
        console.print(Text(f"  warning: {warning}", style="sk.warning"))
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _row_id(row: Any) -> str:
    if not isinstance(row, dict):
        return ""
    value = row.get("id", row.get("name"))
    if value is None and isinstance(row.get("metadata"), dict):
        value = row["metadata"].get("id")
    return "" if value is None else str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="sk.ok"), Text(f"  {result.op}", style="sk.op"))


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            value = _json.dumps(value, separators=(",", ":"))
        console.print(Text.assemble((f"  {key}: ", "sk.key"), str(value)))


def _render_components(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    components = result.data.get("components", [])
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("ID", style="sk.id")
    table.add_column("Name", style="sk.name")
    for component in components:
        table.add_row(str(component.get("id")), str(component.get("name")))
    console.print(table)
    console.print(Text(f"  {len(components)} component(s)", style="sk.key"))


def _render_selection(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("ID", style="sk.id")
    table.add_column("Name", style="sk.name")
    table.add_column("Class", style="sk.class")
    for node in result.data.get("selectedNodes", []):
        meta = node.get("metadata", {})
        table.add_row(str(meta.get("id")), str(meta.get("name")), str(meta.get("class")))
    console.print(table)
    missing = result.data.get("missingIds") or []
    if missing:
        console.print(Text(f"  missing: {', '.join(missing)}", style="sk.warning"))


def _render_tools(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Tool", style="sk.op")
    table.add_column("Category")
    table.add_column("Required")
    table.add_column("Description")
    for tool in result.data.get("tools", []):
        category = tool.get("category", "")
        table.add_row(
            tool["name"],
            Text(category, style=f"sk.category.{category}"),
            ", ".join(tool["parameters"]["required"]),
            tool["description"],
        )
    console.print(table)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(Text("ERROR", style="sk.error"), Text(f"  {result.op}", style="sk.op"))
    if result.error is None:
        console.print("  Unknown error")
        return
    console.print(Text(f"  {result.error.message}"), Text(f" [{result.error.code}]", style="sk.key"))
    if verbose and result.error.detail:
        console.print(Text(f"  detail: {_json.dumps(result.error.detail, default=str)}", style="sk.key"))


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "list_components": _render_components,
    "get_selection": _render_selection,
    "list_tools": _render_tools,
}
