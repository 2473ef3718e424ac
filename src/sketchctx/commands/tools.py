"""tools — print the tool catalog."""

from __future__ import annotations

import click

from sketchctx.commands._base import SketchCommand
from sketchctx.commands._context import AppContext
from sketchctx.services.catalog import TOOLS
from sketchctx.services.result import ServiceResult


@click.command(
    cls=SketchCommand,
    examples="""\
  sketchctx tools
  sketchctx tools --category relay
  sketchctx --json tools""",
)
@click.option(
    "--category",
    type=click.Choice(["query", "relay"]),
    default=None,
    help="Only list tools of this category.",
)
@click.pass_obj
def tools(app: AppContext, category: str | None) -> None:
    """List the tools editors can invoke."""
    catalog = [
        {**tool.schema(), "category": tool.category}
        for tool in TOOLS
        if category is None or tool.category == category
    ]
    app.emit(ServiceResult(ok=True, op="list_tools", data={"count": len(catalog), "tools": catalog}))
