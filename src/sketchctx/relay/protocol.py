"""Relay protocol handler — the message-routing state machine.

Per inbound frame kind:

- ``join``: validate the channel name, join, acknowledge.
- ``message`` with a channel: broadcast to the other members; a frame with
  an ``id`` is registered in the correlation table first, keyed to the
  sender, so the eventual response can be routed back to it.
- response (``id`` present): settle the pending entry.  A reply to an
  unknown or expired ``id`` is dropped (late or duplicate delivery).
- anything else: "unknown message" error to the sender.

Errors are reported to the immediate sender only.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sketchctx.domain.errors import (
    ChannelNotFoundError,
    SketchCtxError,
    UnknownMessageError,
    ValidationError,
)
from sketchctx.domain.frames import (
    JoinFrame,
    MessageFrame,
    ResponseFrame,
    channel_message_frame,
    error_frame,
    join_ack_frame,
    parse_frame,
)
from sketchctx.relay.correlation import PeerOriginator
from sketchctx.relay.peers import deliver

if TYPE_CHECKING:
    from sketchctx.relay.peers import Peer
    from sketchctx.relay.state import RelayState

logger = logging.getLogger(__name__)


class RelayProtocolHandler:
    """Interprets inbound frames against the channel registry and correlation table."""

    def __init__(self, state: RelayState) -> None:
        self._state = state

    async def handle(self, peer: Peer, raw: Any) -> None:
        """Handle one decoded inbound frame from *peer*."""
        try:
            frame = parse_frame(raw)
            if isinstance(frame, JoinFrame):
                await self._on_join(peer, frame)
            elif isinstance(frame, MessageFrame):
                await self._on_message(peer, frame)
            elif isinstance(frame, ResponseFrame):
                await self._on_response(peer, frame)
            else:
                raise UnknownMessageError("Unknown message type or format")
        except SketchCtxError as exc:
            logger.debug("Frame from %s rejected: %s", peer.peer_id, exc.message)
            await deliver(peer, error_frame(exc.message, code=exc.code))

    async def _on_join(self, peer: Peer, frame: JoinFrame) -> None:
        if not frame.channel:
            raise ValidationError("Channel name is required")
        self._state.channels.join(frame.channel, peer)
        await deliver(peer, join_ack_frame(frame.channel))

    async def _on_message(self, peer: Peer, frame: MessageFrame) -> None:
        channels = self._state.channels
        if frame.channel not in channels:
            raise ChannelNotFoundError("Channel not found", details={"channel": frame.channel})
        if frame.id is not None:
            self._state.pending.register(
                frame.id,
                PeerOriginator(peer, self._state.spawn),
                self._state.request_timeout,
            )
        await channels.broadcast(
            frame.channel, peer, channel_message_frame(frame.channel, frame.message)
        )

    async def _on_response(self, peer: Peer, frame: ResponseFrame) -> None:
        pending = self._state.pending
        if frame.id in pending:
            if frame.failed:
                pending.reject(frame.id, frame.error)
            else:
                pending.resolve(frame.id, frame.result)
            return
        if frame.looks_like_reply:
            logger.debug("Dropped reply for unknown request %s from %s", frame.id, peer.peer_id)
            return
        raise UnknownMessageError("Unknown message type or format")
