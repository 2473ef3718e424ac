"""serve — run the relay (HTTP + SSE + WebSocket, optionally stdio)."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click

from sketchctx.commands._base import SketchCommand
from sketchctx.commands._context import AppContext


@click.command(
    cls=SketchCommand,
    examples="""\
  # Relay on the default port (3333)
  sketchctx serve

  # Custom port, with a fallback document for relative locators
  sketchctx serve --port 4000 --local-file ~/Designs/app.sketch

  # Also accept editor envelopes as JSON lines on stdin
  sketchctx serve --stdio

  # Cloud documents need an API key
  SKETCH_API_KEY=sk_xxx sketchctx serve""",
)
@click.option("--port", type=int, default=None, help="Listen port (default 3333).")
@click.option("--host", default=None, help="Bind address (default 127.0.0.1).")
@click.option("--stdio/--no-stdio", default=None, help="Read editor envelopes from stdin.")
@click.option(
    "--local-file",
    type=click.Path(dir_okay=False, resolve_path=True, path_type=Path),
    default=None,
    help="Document used when a locator is not a cloud URL or absolute path.",
)
@click.option("--sketch-api-key", default=None, help="Sketch Cloud API key.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for a plugin response (default 30).",
)
@click.pass_obj
def serve(
    app: AppContext,
    port: int | None,
    host: str | None,
    stdio: bool | None,
    local_file: Path | None,
    sketch_api_key: str | None,
    timeout: float | None,
) -> None:
    """Start the relay server for editors and Sketch plugins."""
    from sketchctx.server.runner import serve_relay

    app.reconfigure(
        server={"port": port, "host": host, "stdio": stdio},
        sketch={"local_file": local_file, "api_key": sketch_api_key},
        relay={"request_timeout": timeout},
    )
    asyncio.run(serve_relay(app.runtime))
