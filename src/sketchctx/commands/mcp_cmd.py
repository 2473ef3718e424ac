"""mcp — expose the tools over MCP (requires sketchctx[mcp] extra)."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from sketchctx.commands._base import SketchCommand
from sketchctx.commands._context import AppContext
from sketchctx.mcp.server import TRANSPORTS


@click.command(
    "mcp",
    cls=SketchCommand,
    examples="""\
  # MCP over stdio, plugins connect to ws://127.0.0.1:3333
  sketchctx mcp

  # Streamable HTTP on a custom address
  sketchctx mcp --transport streamable-http --host 0.0.0.0 --port 9000

  # Move the plugin relay off the default port
  sketchctx mcp --relay-port 4000""",
)
@click.option(
    "--transport",
    default=None,
    type=click.Choice(TRANSPORTS),
    help="MCP transport protocol (default stdio).",
)
@click.option("--host", default=None, help="MCP bind address (HTTP transports only).")
@click.option("--port", type=int, default=None, help="MCP listen port (HTTP transports only).")
@click.option("--relay-port", type=int, default=None, help="Plugin relay port (default 3333).")
@click.option(
    "--local-file",
    type=click.Path(dir_okay=False, resolve_path=True, path_type=Path),
    default=None,
    help="Document used when a locator is not a cloud URL or absolute path.",
)
@click.option("--sketch-api-key", default=None, help="Sketch Cloud API key.")
@click.pass_obj
def mcp_cmd(
    app: AppContext,
    transport: str | None,
    host: str | None,
    port: int | None,
    relay_port: int | None,
    local_file: Path | None,
    sketch_api_key: str | None,
) -> None:
    """Start an MCP server backed by the relay (requires sketchctx[mcp] extra)."""
    from sketchctx.mcp.server import create_server, mcp_available, transport_runner

    if not mcp_available:
        click.echo("MCP not installed. Install with: pip install sketchctx[mcp]", err=True)
        raise SystemExit(1)

    from sketchctx.server.runner import serve_with_mcp

    app.reconfigure(
        mcp={"transport": transport, "host": host, "port": port},
        server={"port": relay_port},
        sketch={"local_file": local_file, "api_key": sketch_api_key},
    )
    settings = app.settings.mcp
    server = create_server(app.runtime, host=settings.host, port=settings.port)
    asyncio.run(serve_with_mcp(app.runtime, transport_runner(server, settings.transport)))
