"""CommandDispatcher — single entry point behind every front end.

``invoke(tool, params)`` validates parameter shape, then either answers a
query locally through :class:`DocumentService` or relays a design-tool
command to the connected plugins and awaits the correlated response.

Relay semantics:
- zero live peers → ``NoPeersError`` immediately, nothing registered;
- otherwise a fresh request ID is registered with the request deadline,
  the command is fanned out to every channel's peers, and the first
  response wins;
- no response before the deadline → ``RequestTimeoutError``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from sketchctx.domain.errors import NoPeersError, SketchCtxError, ValidationError
from sketchctx.domain.frames import channel_message_frame, command_message
from sketchctx.domain.ids import generate_request_id
from sketchctx.relay.correlation import FutureOriginator
from sketchctx.services.base import BaseService
from sketchctx.services.catalog import get_tool, tool_schemas, validate_params
from sketchctx.services.result import ServiceResult

if TYPE_CHECKING:
    from sketchctx.relay.state import RelayState
    from sketchctx.services.catalog import ToolSpec
    from sketchctx.services.document import DocumentService

logger = logging.getLogger(__name__)


class CommandDispatcher(BaseService):
    """Route tool invocations to the document engine or the relay."""

    def __init__(self, state: RelayState, documents: DocumentService) -> None:
        self._state = state
        self._documents = documents

    @property
    def tools(self) -> list[dict[str, Any]]:
        return tool_schemas()

    async def invoke(self, tool_name: str, params: Any = None) -> ServiceResult:
        """Run one tool and return its ServiceResult (never raises domain errors)."""
        try:
            tool = get_tool(tool_name)
            checked = validate_params(tool, params)
        except SketchCtxError as exc:
            return ServiceResult.failure(tool_name, exc)

        logger.debug("Invoking %s (%s)", tool.name, tool.category)
        if tool.category == "relay":
            return await self._run(tool.name, self.relay(tool, checked))
        return await self._query(tool, checked)

    async def relay(self, tool: ToolSpec, params: dict[str, Any]) -> dict[str, Any]:
        """Send *tool* to the design tool and await its correlated result.

        Raises:
            NoPeersError: No plugin is connected.
            RequestTimeoutError: No plugin answered before the deadline.
            PeerCommandError: The plugin answered with an error.
        """
        state = self._state
        if state.peer_count == 0:
            raise NoPeersError("No connected Sketch instances")

        request_id = generate_request_id()
        while request_id in state.pending:
            request_id = generate_request_id()

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        state.pending.register(request_id, FutureOriginator(future), state.request_timeout)

        payload = command_message(request_id, tool.name, params)
        delivered = await state.channels.fan_out(
            lambda channel: channel_message_frame(channel, payload)
        )
        logger.info("Relayed %s as %s to %d peer(s)", tool.name, request_id, delivered)

        result = await future
        return {"id": request_id, "command": tool.name, "result": result}

    async def _query(self, tool: ToolSpec, params: dict[str, Any]) -> ServiceResult:
        docs = self._documents
        if tool.name == "get_file":
            return await docs.get_file(params["url"], params.get("nodeId"))
        if tool.name == "list_components":
            return await docs.list_components(params["url"])
        selection_ids = params["selectionIds"]
        if not isinstance(selection_ids, list):
            exc = ValidationError("selectionIds must be an array", details={"tool": tool.name})
            return ServiceResult.failure(tool.name, exc)
        return await docs.get_selection(params["url"], [str(i) for i in selection_ids])
