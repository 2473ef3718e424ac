"""RelayState — process-scoped relay state, injected into every component.

One instance is created per server process (and per test).  It owns the
live peer set, the push-only sink set, channel membership, the correlation
table, and the background delivery tasks spawned by settled requests.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any

from sketchctx.relay.channels import ChannelRegistry
from sketchctx.relay.correlation import DEFAULT_TIMEOUT_SECONDS, CorrelationTable

if TYPE_CHECKING:
    from sketchctx.relay.peers import Peer

logger = logging.getLogger(__name__)


class RelayState:
    """Shared mutable state of one relay process.

    Attributes:
        channels: Channel membership of bidirectional peers.
        pending: Correlation table of outstanding requests.
        peers: Live bidirectional peers (WebSocket plugins).
        sinks: Live push-only sinks (SSE listeners).
        request_timeout: Deadline for correlated requests, in seconds.
    """

    def __init__(self, *, request_timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.request_timeout = request_timeout
        self.channels = ChannelRegistry()
        self.pending = CorrelationTable(default_timeout=request_timeout)
        self.peers: set[Peer] = set()
        self.sinks: set[Peer] = set()
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def peer_count(self) -> int:
        return len(self.peers)

    def spawn(self, awaitable: Awaitable[Any]) -> asyncio.Task[Any]:
        """Run *awaitable* in the background, keeping a reference until done."""
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every background delivery spawned so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Drop pending requests and wait for in-flight deliveries."""
        if len(self.pending):
            logger.info("Dropping %d pending request(s) on shutdown", len(self.pending))
        self.pending.clear()
        await self.drain()
