"""MCP tool definitions: 5 tools across 2 categories.

Categories: Query (3), Relay (2).
Each tool has a ``<name>_impl`` coroutine testable without the mcp package.
``register_tools()`` wraps them with FastMCP decorators.
"""

from __future__ import annotations

from typing import Any

from sketchctx.services.result import ServiceResult


def _to_mcp_response(result: ServiceResult) -> dict[str, Any]:
    """Convert a ServiceResult to an MCP-friendly dict."""
    response: dict[str, Any] = {
        "ok": result.ok,
        "op": result.op,
        "data": result.data,
    }
    if result.warnings:
        response["warnings"] = result.warnings
    if result.error is not None:
        response["error"] = {
            "code": result.error.code,
            "message": result.error.message,
        }
    return response


def _drop_none(**params: Any) -> dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


# ---------------------------------------------------------------------------
# Query tools (3)
# ---------------------------------------------------------------------------


async def get_file_impl(dispatcher: Any, url: str, *, node_id: str | None = None) -> dict[str, Any]:
    """Read a document, or a single node of it."""
    result = await dispatcher.invoke("get_file", _drop_none(url=url, nodeId=node_id))
    return _to_mcp_response(result)


async def list_components_impl(dispatcher: Any, url: str) -> dict[str, Any]:
    """List reusable components of a document."""
    result = await dispatcher.invoke("list_components", {"url": url})
    return _to_mcp_response(result)


async def get_selection_impl(dispatcher: Any, url: str, selection_ids: list[str]) -> dict[str, Any]:
    """Resolve selected node IDs against a document."""
    result = await dispatcher.invoke("get_selection", {"url": url, "selectionIds": selection_ids})
    return _to_mcp_response(result)


# ---------------------------------------------------------------------------
# Relay tools (2)
# ---------------------------------------------------------------------------


async def create_rectangle_impl(
    dispatcher: Any,
    width: float,
    height: float,
    *,
    x: float | None = None,
    y: float | None = None,
    color: str | None = None,
) -> dict[str, Any]:
    """Ask a connected plugin to draw a rectangle."""
    params = _drop_none(x=x, y=y, width=width, height=height, color=color)
    result = await dispatcher.invoke("create_rectangle", params)
    return _to_mcp_response(result)


async def create_text_impl(
    dispatcher: Any,
    text: str,
    *,
    x: float | None = None,
    y: float | None = None,
    font_size: float | None = None,
    color: str | None = None,
) -> dict[str, Any]:
    """Ask a connected plugin to add a text layer."""
    params = _drop_none(text=text, x=x, y=y, fontSize=font_size, color=color)
    result = await dispatcher.invoke("create_text", params)
    return _to_mcp_response(result)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def register_tools(server: Any, dispatcher: Any) -> None:
    """Register all 5 MCP tools on the FastMCP server."""

    @server.tool()  # type: ignore[untyped-decorator]
    async def get_file(url: str, node_id: str | None = None) -> dict[str, Any]:
        """Get the contents of a Sketch file, or one node when node_id is given."""
        return await get_file_impl(dispatcher, url, node_id=node_id)

    @server.tool()  # type: ignore[untyped-decorator]
    async def list_components(url: str) -> dict[str, Any]:
        """List all components (symbol masters) in a Sketch file."""
        return await list_components_impl(dispatcher, url)

    @server.tool()  # type: ignore[untyped-decorator]
    async def get_selection(url: str, selection_ids: list[str]) -> dict[str, Any]:
        """Get information about selected elements in a Sketch document."""
        return await get_selection_impl(dispatcher, url, selection_ids)

    @server.tool()  # type: ignore[untyped-decorator]
    async def create_rectangle(
        width: float,
        height: float,
        x: float | None = None,
        y: float | None = None,
        color: str | None = None,
    ) -> dict[str, Any]:
        """Create a new rectangle in the open Sketch document."""
        return await create_rectangle_impl(dispatcher, width, height, x=x, y=y, color=color)

    @server.tool()  # type: ignore[untyped-decorator]
    async def create_text(
        text: str,
        x: float | None = None,
        y: float | None = None,
        font_size: float | None = None,
        color: str | None = None,
    ) -> dict[str, Any]:
        """Create a new text layer in the open Sketch document."""
        return await create_text_impl(dispatcher, text, x=x, y=y, font_size=font_size, color=color)
