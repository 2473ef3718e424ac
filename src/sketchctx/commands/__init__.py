"""Subcommand modules for sketchctx.

Provides register_commands() which uses deferred imports so that
``sketchctx --help`` does not load FastAPI or uvicorn.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the query group and the standalone commands on the root group."""
    # --- Groups ---
    from sketchctx.commands.query import query

    cli.add_command(query)

    # --- Standalone commands ---
    from sketchctx.commands.call import call
    from sketchctx.commands.mcp_cmd import mcp_cmd
    from sketchctx.commands.serve import serve
    from sketchctx.commands.tools import tools

    cli.add_command(serve)
    cli.add_command(mcp_cmd)
    cli.add_command(tools)
    cli.add_command(call)
