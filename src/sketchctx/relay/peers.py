"""Peer abstraction — bidirectional WebSocket peers and push-only SSE sinks.

A peer is hashable by identity, so it can live in the registry's sets.
``deliver`` is the only way the relay writes to a peer: it skips peers
that are not writable and isolates transport failures to the peer that
caused them.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from itertools import count
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from starlette.websockets import WebSocket

logger = logging.getLogger(__name__)

_peer_counter = count(1)


class Peer(ABC):
    """A connected endpoint that can receive relay frames."""

    kind = "peer"

    def __init__(self) -> None:
        self.peer_id = f"{self.kind}-{next(_peer_counter)}"

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the transport is currently writable."""

    @abstractmethod
    async def send(self, payload: dict[str, Any]) -> None:
        """Write one JSON payload to the transport."""

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<{type(self).__name__} {self.peer_id} {state}>"


class WebSocketPeer(Peer):
    """Design-tool plugin connected over a WebSocket."""

    kind = "ws"

    def __init__(self, websocket: WebSocket) -> None:
        super().__init__()
        self.websocket = websocket

    @property
    def is_open(self) -> bool:
        from starlette.websockets import WebSocketState

        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send(self, payload: dict[str, Any]) -> None:
        await self.websocket.send_text(json.dumps(payload))


class SsePeer(Peer):
    """Push-only sink: an editor listening on the server-sent events stream.

    Payloads are queued and drained by :meth:`stream`, which yields
    ready-to-write ``data: ...`` events until the sink is closed.
    """

    kind = "sse"

    def __init__(self) -> None:
        super().__init__()
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    async def send(self, payload: dict[str, Any]) -> None:
        self._queue.put_nowait(format_sse(payload))

    def close(self) -> None:
        if self._open:
            self._open = False
            self._queue.put_nowait(None)

    async def stream(self) -> AsyncIterator[str]:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event


def format_sse(payload: dict[str, Any]) -> str:
    """Encode a payload as one server-sent event."""
    return f"data: {json.dumps(payload)}\n\n"


async def deliver(peer: Peer, payload: dict[str, Any]) -> bool:
    """Send *payload* to *peer* if it is writable.

    Returns True when the payload was handed to the transport.  A failing
    transport is logged and reported as not delivered; it never affects
    other peers.
    """
    if not peer.is_open:
        return False
    try:
        await peer.send(payload)
    except Exception:
        logger.warning("Delivery to %s failed", peer.peer_id, exc_info=True)
        return False
    return True
