"""FastMCP server setup.

Optional extra — guarded behind try/except ImportError.
Transport: stdio default, SSE and streamable HTTP optional.  The MCP
server shares the relay runtime, so relay tools reach the same plugins
that are connected to the WebSocket listener.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sketchctx.server.runtime import Runtime

mcp_available = False
_FastMCP: Any = None

try:
    from mcp.server.fastmcp import FastMCP as _FastMCP  # type: ignore[no-redef,import-not-found]

    mcp_available = True
except ImportError:
    pass

__all__ = ["TRANSPORTS", "create_server", "mcp_available", "transport_runner"]

TRANSPORTS = ("stdio", "sse", "streamable-http")


def create_server(runtime: Runtime, *, host: str = "127.0.0.1", port: int = 8000) -> Any:
    """Create and configure the MCP server around *runtime*.

    *host* and *port* configure the bind address for HTTP transports
    (sse, streamable-http). They are ignored when using stdio.

    Raises RuntimeError if the mcp extra is not installed.
    """
    if not mcp_available or _FastMCP is None:
        msg = "MCP extra not installed. Install with: pip install sketchctx[mcp]"
        raise RuntimeError(msg)

    from sketchctx.mcp.resources import register_resources
    from sketchctx.mcp.tools import register_tools

    server = _FastMCP("sketchctx", host=host, port=port)

    register_tools(server, runtime.dispatcher)
    register_resources(server, runtime)

    return server


def transport_runner(server: Any, transport: str) -> Any:
    """Return the coroutine function that serves *server* over *transport*."""
    runners = {
        "stdio": server.run_stdio_async,
        "sse": server.run_sse_async,
        "streamable-http": server.run_streamable_http_async,
    }
    if transport not in runners:
        msg = f"Unknown MCP transport: {transport}"
        raise ValueError(msg)
    return runners[transport]
