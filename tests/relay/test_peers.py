"""Tests for peer delivery and the SSE sink."""

from __future__ import annotations

import pytest

from sketchctx.relay.peers import SsePeer, deliver, format_sse
from tests.conftest import FakePeer


class TestDeliver:
    @pytest.mark.asyncio
    async def test_open_peer(self) -> None:
        peer = FakePeer()
        assert await deliver(peer, {"a": 1}) is True
        assert peer.sent == [{"a": 1}]

    @pytest.mark.asyncio
    async def test_closed_peer_skipped(self) -> None:
        assert await deliver(FakePeer(open=False), {"a": 1}) is False

    @pytest.mark.asyncio
    async def test_transport_failure_contained(self) -> None:
        assert await deliver(FakePeer(fail=True), {"a": 1}) is False


class TestSsePeer:
    def test_format(self) -> None:
        assert format_sse({"type": "pong"}) == 'data: {"type": "pong"}\n\n'

    @pytest.mark.asyncio
    async def test_stream_until_closed(self) -> None:
        sink = SsePeer()
        await sink.send({"n": 1})
        await sink.send({"n": 2})
        sink.close()
        events = [event async for event in sink.stream()]
        assert events == ['data: {"n": 1}\n\n', 'data: {"n": 2}\n\n']
        assert not sink.is_open

    @pytest.mark.asyncio
    async def test_closed_sink_not_delivered(self) -> None:
        sink = SsePeer()
        sink.close()
        assert await deliver(sink, {"n": 1}) is False

    def test_peer_ids_unique(self) -> None:
        assert SsePeer().peer_id != SsePeer().peer_id
