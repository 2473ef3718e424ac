"""FastAPI application exposing the relay over HTTP, SSE, and WebSocket.

Routes:
- ``GET /``          — human-readable status page
- ``GET /sse``       — push-only event stream for editors
- ``POST /messages`` — editor envelopes (ping / get_tools / execute_tool)
- ``WS /``           — design-tool plugins speaking the relay protocol
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse

from sketchctx import __version__
from sketchctx.relay.peers import SsePeer, WebSocketPeer
from sketchctx.server.envelopes import error_envelope, handle_envelope

if TYPE_CHECKING:
    from sketchctx.server.runtime import Runtime

logger = logging.getLogger(__name__)

_SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

_STATUS_PAGE = """\
<h1>Sketch MCP Server</h1>
<p>Server is running!</p>
<p>SSE endpoint available at <a href="/sse">http://{host}:{port}/sse</a></p>
<p>Message endpoint available at http://{host}:{port}/messages</p>
<p>WebSocket endpoint available at ws://{host}:{port}</p>
"""


def create_app(runtime: Runtime) -> FastAPI:
    """Build the relay application around a shared :class:`Runtime`."""
    app = FastAPI(title="sketchctx", version=__version__)
    app.state.runtime = runtime
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    multiplexer = runtime.multiplexer
    dispatcher = runtime.dispatcher
    server = runtime.settings.server

    @app.get("/", response_class=HTMLResponse)
    async def index() -> str:
        return _STATUS_PAGE.format(host=server.host, port=server.port)

    @app.get("/sse")
    async def sse() -> StreamingResponse:
        sink = SsePeer()
        await multiplexer.add_sink(sink)

        async def events() -> AsyncIterator[str]:
            try:
                async for event in sink.stream():
                    yield event
            finally:
                sink.close()
                multiplexer.remove_sink(sink)

        return StreamingResponse(events(), media_type="text/event-stream", headers=_SSE_HEADERS)

    @app.post("/messages")
    async def messages(request: Request) -> JSONResponse:
        try:
            body: Any = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JSONResponse(
                error_envelope("Invalid message format", code="VALIDATION_ERROR"),
                status_code=400,
            )
        try:
            status, payload = await handle_envelope(dispatcher, body)
        except Exception as exc:
            logger.exception("Unhandled error answering %s", body.get("type") if isinstance(body, dict) else body)
            return JSONResponse(error_envelope(str(exc) or type(exc).__name__), status_code=500)
        return JSONResponse(payload, status_code=status)

    @app.websocket("/")
    async def plugin_socket(websocket: WebSocket) -> None:
        await websocket.accept()
        await multiplexer.serve(WebSocketPeer(websocket), _frames(websocket))

    return app


async def _frames(websocket: WebSocket) -> AsyncIterator[str | bytes]:
    """Yield inbound text or binary frames until the client disconnects."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return
        text = message.get("text")
        yield text if text is not None else message.get("bytes") or b""
