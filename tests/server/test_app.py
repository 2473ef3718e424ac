"""Tests for the FastAPI relay app (HTTP envelopes and WebSocket peers)."""

from __future__ import annotations

from collections.abc import Generator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sketchctx.server.app import create_app
from sketchctx.server.runtime import Runtime


@pytest.fixture
def client(runtime: Runtime) -> Generator[TestClient]:
    # One portal for the whole test so HTTP and WebSocket share an event loop.
    with TestClient(create_app(runtime)) as test_client:
        yield test_client


def _join(ws: object, channel: str) -> None:
    ws.send_json({"type": "join", "channel": channel})  # type: ignore[attr-defined]
    ack = ws.receive_json()  # type: ignore[attr-defined]
    assert ack == {"type": "system", "channel": channel, "message": {"result": True}}


class TestIndex:
    def test_status_page(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert "Sketch MCP Server" in response.text
        assert "ws://127.0.0.1:3333" in response.text

    def test_sse_route_registered(self, client: TestClient) -> None:
        assert "/sse" in {getattr(route, "path", None) for route in client.app.routes}  # type: ignore[attr-defined]


class TestMessages:
    def test_ping(self, client: TestClient) -> None:
        assert client.post("/messages", json={"type": "ping"}).json() == {"type": "pong"}

    def test_get_tools(self, client: TestClient) -> None:
        body = client.post("/messages", json={"type": "get_tools"}).json()
        assert body["type"] == "tools"
        assert [tool["name"] for tool in body["tools"]][:2] == ["get_file", "list_components"]

    def test_execute_query_tool(self, client: TestClient, sketch_file: Path) -> None:
        response = client.post(
            "/messages",
            json={"type": "execute_tool", "id": "q1", "tool": "list_components", "params": {"url": str(sketch_file)}},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["type"] == "tool_result"
        assert body["id"] == "q1"
        assert body["result"]["count"] == 3

    def test_unknown_tool(self, client: TestClient) -> None:
        response = client.post("/messages", json={"type": "execute_tool", "tool": "explode", "params": {}})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "UNKNOWN_TOOL"
        assert error["message"] == "Unknown tool: explode"
        assert error["suggestion"]

    def test_node_not_found(self, client: TestClient, sketch_file: Path) -> None:
        response = client.post(
            "/messages",
            json={"type": "execute_tool", "tool": "get_file", "params": {"url": str(sketch_file), "nodeId": "nope"}},
        )
        assert response.status_code == 404

    def test_relay_without_plugins(self, client: TestClient) -> None:
        response = client.post("/messages", json={"type": "execute_tool", "tool": "create_text", "params": {"text": "Hi"}})
        assert response.status_code == 503
        assert response.json()["error"]["message"] == "No connected Sketch instances"

    def test_unknown_envelope_type(self, client: TestClient) -> None:
        response = client.post("/messages", json={"type": "subscribe"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "UNKNOWN_MESSAGE"

    def test_invalid_json_body(self, client: TestClient) -> None:
        response = client.post("/messages", content=b"{nope", headers={"content-type": "application/json"})
        assert response.status_code == 400
        assert response.json()["type"] == "error"


class TestWebSocket:
    def test_welcome_and_join(self, client: TestClient) -> None:
        with client.websocket_connect("/") as ws:
            assert ws.receive_json() == {"type": "connected", "message": "Connected to Sketch MCP server"}
            _join(ws, "design")

    def test_malformed_frame(self, client: TestClient) -> None:
        with client.websocket_connect("/") as ws:
            ws.receive_json()
            ws.send_text("not json")
            assert ws.receive_json() == {
                "type": "error",
                "message": "Invalid message format",
                "code": "VALIDATION_ERROR",
            }
            # The connection survives.
            _join(ws, "design")

    def test_channel_broadcast_between_peers(self, client: TestClient) -> None:
        with client.websocket_connect("/") as a, client.websocket_connect("/") as b:
            a.receive_json()
            b.receive_json()
            _join(a, "design")
            _join(b, "design")
            a.send_json({"type": "message", "channel": "design", "id": "r1", "message": {"hello": True}})
            assert b.receive_json() == {"type": "message", "channel": "design", "message": {"hello": True}}
            b.send_json({"id": "r1", "result": {"hi": "back"}})
            assert a.receive_json() == {"id": "r1", "type": "message", "result": {"hi": "back"}}

    def test_relay_tool_round_trip(self, client: TestClient) -> None:
        with client.websocket_connect("/") as plugin:
            plugin.receive_json()
            _join(plugin, "sketch")
            with ThreadPoolExecutor(max_workers=1) as pool:
                pending = pool.submit(
                    client.post,
                    "/messages",
                    json={"type": "execute_tool", "id": "call-1", "tool": "create_text", "params": {"text": "Hi"}},
                )
                command = plugin.receive_json()
                assert command["type"] == "message"
                assert command["channel"] == "sketch"
                message = command["message"]
                assert message["command"] == "create_text"
                assert message["params"] == {"text": "Hi"}
                plugin.send_json({"id": message["id"], "result": {"layer": "T1"}})
                response = pending.result(timeout=10)

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "call-1"
        assert body["result"]["result"] == {"layer": "T1"}
