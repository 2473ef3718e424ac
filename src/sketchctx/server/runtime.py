"""Runtime — wires relay state, protocol, multiplexer, and dispatcher.

One :class:`Runtime` per process.  Every front end (HTTP app, stdio
surface, MCP server, CLI queries) receives the same instance, so they all
share the peer set, channels, and correlation table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sketchctx.infrastructure.cloud import SketchCloudClient
from sketchctx.infrastructure.sources import DocumentLoader
from sketchctx.relay.multiplexer import ConnectionMultiplexer
from sketchctx.relay.protocol import RelayProtocolHandler
from sketchctx.relay.state import RelayState
from sketchctx.services.dispatcher import CommandDispatcher
from sketchctx.services.document import DocumentService

if TYPE_CHECKING:
    import httpx

    from sketchctx.config.settings import SketchSettings


@dataclass(frozen=True)
class Runtime:
    settings: SketchSettings
    state: RelayState
    multiplexer: ConnectionMultiplexer
    dispatcher: CommandDispatcher


def build_runtime(
    settings: SketchSettings,
    *,
    cloud_transport: httpx.AsyncBaseTransport | None = None,
) -> Runtime:
    """Create a fresh, isolated runtime from *settings*."""
    state = RelayState(request_timeout=settings.relay.request_timeout)
    multiplexer = ConnectionMultiplexer(
        state,
        RelayProtocolHandler(state),
        welcome=settings.relay.welcome,
    )
    cloud = SketchCloudClient(
        settings.sketch.api_key,
        api_base=settings.sketch.api_base,
        timeout=settings.sketch.http_timeout,
        transport=cloud_transport,
    )
    documents = DocumentService(DocumentLoader(cloud, local_file=settings.sketch.local_file))
    return Runtime(
        settings=settings,
        state=state,
        multiplexer=multiplexer,
        dispatcher=CommandDispatcher(state, documents),
    )
