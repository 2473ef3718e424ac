"""Command group: read documents locally, without a running relay."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from sketchctx.commands._base import SketchGroup
from sketchctx.infrastructure.cloud import is_cloud_url

if TYPE_CHECKING:
    from sketchctx.commands._context import AppContext

_QUERY_EXAMPLES = """\
  sketchctx query file ./app.sketch
  sketchctx query file ./app.sketch --node-id 3C5B-77A1
  sketchctx query components https://www.sketch.cloud/s/Abc123
  sketchctx query selection ./app.sketch 3C5B-77A1 9F00-1D2E
  sketchctx --json query components ./app.sketch"""


def _locator(value: str) -> str:
    """Make existing relative paths absolute; anything else passes through."""
    if is_cloud_url(value):
        return value
    path = Path(value).expanduser()
    if path.exists():
        return str(path.resolve())
    return value


def _invoke(app: AppContext, tool: str, params: dict[str, Any]) -> None:
    result = asyncio.run(app.runtime.dispatcher.invoke(tool, params))
    app.emit(result)


@click.group(cls=SketchGroup, examples=_QUERY_EXAMPLES)
@click.pass_obj
def query(app: AppContext) -> None:
    """Inspect Sketch documents (local files or Sketch Cloud)."""


@query.command(
    "file",
    examples="""\
  sketchctx query file ./app.sketch
  sketchctx query file /abs/path/app.sketch --node-id 3C5B-77A1""",
)
@click.argument("locator")
@click.option("--node-id", default=None, help="Return only this node, with metadata.")
@click.pass_obj
def file_cmd(app: AppContext, locator: str, node_id: str | None) -> None:
    """Print a document tree, or a single node of it."""
    params: dict[str, Any] = {"url": _locator(locator)}
    if node_id:
        params["nodeId"] = node_id
    _invoke(app, "get_file", params)


@query.command(
    examples="""\
  sketchctx query components ./app.sketch
  sketchctx -q query components ./app.sketch"""
)
@click.argument("locator")
@click.pass_obj
def components(app: AppContext, locator: str) -> None:
    """List component masters in document order."""
    _invoke(app, "list_components", {"url": _locator(locator)})


@query.command(
    examples="""\
  sketchctx query selection ./app.sketch 3C5B-77A1 9F00-1D2E"""
)
@click.argument("locator")
@click.argument("node_ids", nargs=-1, required=True)
@click.pass_obj
def selection(app: AppContext, locator: str, node_ids: tuple[str, ...]) -> None:
    """Resolve selected node IDs; unknown IDs are reported as missing."""
    _invoke(app, "get_selection", {"url": _locator(locator), "selectionIds": list(node_ids)})
