"""Connection multiplexer — live peer lifecycle and inbound dispatch.

Bidirectional peers (design-tool plugins) are acknowledged on connect,
have every inbound text frame decoded and handed to the protocol handler,
and are pruned from the channel registry on disconnect.  Push-only sinks
(editor event streams) are tracked separately: they receive broadcasts but
never join channels.

INVARIANT: a malformed frame from one peer produces an error frame for
that peer only and never touches shared state.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

from sketchctx.domain.frames import connected_frame, connection_success_frame, error_frame
from sketchctx.relay.peers import deliver

if TYPE_CHECKING:
    from sketchctx.relay.peers import Peer
    from sketchctx.relay.protocol import RelayProtocolHandler
    from sketchctx.relay.state import RelayState

logger = logging.getLogger(__name__)

DEFAULT_WELCOME = "Connected to Sketch MCP server"


class ConnectionMultiplexer:
    """Owns the live peer and sink sets of a :class:`RelayState`."""

    def __init__(
        self,
        state: RelayState,
        handler: RelayProtocolHandler,
        *,
        welcome: str = DEFAULT_WELCOME,
    ) -> None:
        self._state = state
        self._handler = handler
        self._welcome = welcome

    # ------------------------------------------------------------------
    # Bidirectional peers
    # ------------------------------------------------------------------

    async def connect(self, peer: Peer) -> None:
        self._state.peers.add(peer)
        logger.info("Peer %s connected (%d live)", peer.peer_id, self._state.peer_count)
        await deliver(peer, connected_frame(self._welcome))

    async def receive(self, peer: Peer, text: str | bytes) -> None:
        """Decode one inbound frame and hand it to the protocol handler."""
        try:
            raw: Any = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Malformed frame from %s", peer.peer_id)
            await deliver(peer, error_frame("Invalid message format"))
            return
        await self._handler.handle(peer, raw)

    def disconnect(self, peer: Peer) -> None:
        self._state.peers.discard(peer)
        left = self._state.channels.leave(peer)
        logger.info(
            "Peer %s disconnected (left %d channel(s), %d live)",
            peer.peer_id,
            len(left),
            self._state.peer_count,
        )

    async def serve(self, peer: Peer, frames: AsyncIterator[str | bytes]) -> None:
        """Run one peer's session: connect, process frames in order, disconnect."""
        await self.connect(peer)
        try:
            async for text in frames:
                await self.receive(peer, text)
        finally:
            self.disconnect(peer)

    # ------------------------------------------------------------------
    # Push-only sinks
    # ------------------------------------------------------------------

    async def add_sink(self, sink: Peer) -> None:
        self._state.sinks.add(sink)
        logger.info("Sink %s attached", sink.peer_id)
        await deliver(sink, connection_success_frame())

    def remove_sink(self, sink: Peer) -> None:
        self._state.sinks.discard(sink)
        logger.info("Sink %s detached", sink.peer_id)

    # ------------------------------------------------------------------
    # Broadcast
    # ------------------------------------------------------------------

    async def broadcast_all(self, payload: dict[str, Any]) -> int:
        """Deliver *payload* to every live peer and sink."""
        targets = [*self._state.sinks, *self._state.peers]
        delivered = 0
        for target in targets:
            if await deliver(target, payload):
                delivered += 1
        return delivered
