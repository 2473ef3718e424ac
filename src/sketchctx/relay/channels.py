"""Channel registry — channel name → set of subscribed peers.

INVARIANT: a channel with zero peers does not exist (no ghost channels).
Membership changes are synchronous; ``broadcast`` snapshots membership
before its first suspension point.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from sketchctx.domain.errors import ChannelNotFoundError
from sketchctx.relay.peers import deliver

if TYPE_CHECKING:
    from sketchctx.relay.peers import Peer

logger = logging.getLogger(__name__)


class ChannelRegistry:
    """Pub/sub channel membership for connected peers."""

    def __init__(self) -> None:
        self._channels: dict[str, set[Peer]] = {}

    def __len__(self) -> int:
        return len(self._channels)

    def __contains__(self, channel: object) -> bool:
        return channel in self._channels

    def channels(self) -> list[str]:
        return list(self._channels)

    def peers(self, channel: str) -> frozenset[Peer]:
        return frozenset(self._channels.get(channel, ()))

    def memberships(self, peer: Peer) -> list[str]:
        return [name for name, members in self._channels.items() if peer in members]

    def join(self, channel: str, peer: Peer) -> bool:
        """Add *peer* to *channel*, creating it if absent.

        Returns False when the peer was already a member.
        """
        members = self._channels.setdefault(channel, set())
        if peer in members:
            return False
        members.add(peer)
        logger.info("Peer %s joined channel %s", peer.peer_id, channel)
        return True

    def leave(self, peer: Peer) -> list[str]:
        """Remove *peer* from every channel; delete channels left empty.

        Returns the names of the channels the peer was removed from.
        """
        left: list[str] = []
        for name in list(self._channels):
            members = self._channels[name]
            if peer not in members:
                continue
            members.discard(peer)
            left.append(name)
            if not members:
                del self._channels[name]
                logger.debug("Channel %s removed (empty)", name)
        return left

    async def broadcast(self, channel: str, sender: Peer | None, payload: dict[str, Any]) -> int:
        """Deliver *payload* to every writable member of *channel* except *sender*.

        Returns the number of peers the payload was delivered to.

        Raises:
            ChannelNotFoundError: *channel* does not exist.
        """
        members = self._channels.get(channel)
        if members is None:
            raise ChannelNotFoundError("Channel not found", details={"channel": channel})
        targets = [peer for peer in members if peer is not sender]
        delivered = 0
        for peer in targets:
            if await deliver(peer, payload):
                delivered += 1
        return delivered

    async def fan_out(self, payload_for: Callable[[str], dict[str, Any]]) -> int:
        """Deliver ``payload_for(channel)`` to every writable peer of every channel.

        Used for relayed commands, which are not addressed to one channel.
        """
        targets = [(name, peer) for name, members in self._channels.items() for peer in members]
        delivered = 0
        for name, peer in targets:
            if await deliver(peer, payload_for(name)):
                delivered += 1
        return delivered
