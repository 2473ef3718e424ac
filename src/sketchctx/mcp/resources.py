"""MCP resource definitions (sketchctx://status and sketchctx://tools)."""

from __future__ import annotations

from typing import Any


def status_impl(runtime: Any) -> dict[str, Any]:
    """Live relay status: peers, sinks, channels, outstanding requests."""
    state = runtime.state
    return {
        "peers": state.peer_count,
        "sinks": len(state.sinks),
        "channels": {name: len(state.channels.peers(name)) for name in state.channels.channels()},
        "pending": len(state.pending),
        "request_timeout": state.request_timeout,
    }


def tools_impl(runtime: Any) -> list[dict[str, Any]]:
    """Tool catalog as exposed to editors over HTTP."""
    return list(runtime.dispatcher.tools)


def register_resources(server: Any, runtime: Any) -> None:
    """Register MCP resources on the FastMCP server."""

    @server.resource("sketchctx://status")  # type: ignore[untyped-decorator]
    def status() -> dict[str, Any]:
        """Connected plugins, channels, and pending relay requests."""
        return status_impl(runtime)

    @server.resource("sketchctx://tools")  # type: ignore[untyped-decorator]
    def tools() -> list[dict[str, Any]]:
        """The tool catalog."""
        return tools_impl(runtime)
