"""Run the uvicorn relay, alone or next to stdio or an MCP transport."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import uvicorn

from sketchctx.server.app import create_app
from sketchctx.server.stdio import run_stdio, stdin_lines

if TYPE_CHECKING:
    from sketchctx.server.runtime import Runtime

logger = logging.getLogger(__name__)


def build_server(runtime: Runtime) -> uvicorn.Server:
    """Create a uvicorn server for the relay app; logging stays with structlog."""
    server = runtime.settings.server
    config = uvicorn.Config(
        create_app(runtime),
        host=server.host,
        port=server.port,
        log_config=None,
        ws="websockets",
    )
    return uvicorn.Server(config)


async def serve_relay(runtime: Runtime, *, stdio: bool | None = None) -> None:
    """Run the relay until interrupted, plus the stdin surface when enabled."""
    use_stdio = runtime.settings.server.stdio if stdio is None else stdio
    server = build_server(runtime)
    logger.info(
        "Relay listening on %s:%d%s",
        runtime.settings.server.host,
        runtime.settings.server.port,
        " (stdio enabled)" if use_stdio else "",
    )
    try:
        if use_stdio:
            await asyncio.gather(
                server.serve(),
                run_stdio(runtime.dispatcher, runtime.multiplexer, stdin_lines()),
            )
        else:
            await server.serve()
    finally:
        await runtime.state.close()


async def serve_with_mcp(runtime: Runtime, run_mcp: Callable[[], Awaitable[Any]]) -> None:
    """Run the relay alongside an MCP transport; the relay stops when MCP ends."""
    server = build_server(runtime)

    async def _mcp() -> None:
        try:
            await run_mcp()
        finally:
            server.should_exit = True

    try:
        await asyncio.gather(server.serve(), _mcp())
    finally:
        await runtime.state.close()
