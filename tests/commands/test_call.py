"""Tests for the call command and its HTTP helpers."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import patch

import httpx
import pytest
from click.testing import CliRunner

from sketchctx.cli import cli
from sketchctx.commands.call import envelope_result, post_envelope


class TestEnvelopeResult:
    def test_tool_result(self) -> None:
        result = envelope_result("create_text", {"type": "tool_result", "id": None, "result": {"layer": "T1"}})
        assert result.ok is True
        assert result.data == {"layer": "T1"}

    def test_error(self) -> None:
        body = {
            "type": "error",
            "error": {"message": "No connected Sketch instances", "code": "NO_PEERS", "details": {}},
        }
        result = envelope_result("create_text", body)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NO_PEERS"

    def test_malformed_error(self) -> None:
        result = envelope_result("x", {"type": "error", "error": "flat string"})
        assert result.error is not None
        assert result.error.code == "UNKNOWN_ERROR"
        assert result.error.message == "flat string"


class TestPostEnvelope:
    def test_posts_to_messages(self) -> None:
        seen: dict[str, Any] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"type": "pong"})

        body = post_envelope(
            "http://relay.test",
            {"type": "ping"},
            timeout=1.0,
            transport=httpx.MockTransport(handler),
        )
        assert body == {"type": "pong"}
        assert seen == {"path": "/messages", "body": {"type": "ping"}}

    def test_error_status_still_decoded(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"type": "error", "error": {"code": "NO_PEERS"}})

        body = post_envelope("http://relay.test", {}, timeout=1.0, transport=httpx.MockTransport(handler))
        assert body["error"]["code"] == "NO_PEERS"


class TestCallCommand:
    def test_success(self, cli_runner: CliRunner) -> None:
        captured: dict[str, Any] = {}

        def fake_post(url: str, envelope: dict[str, Any], *, timeout: float) -> dict[str, Any]:
            captured.update(url=url, envelope=envelope, timeout=timeout)
            return {"type": "tool_result", "id": None, "result": {"layer": "R9"}}

        with patch("sketchctx.commands.call.post_envelope", fake_post):
            result = cli_runner.invoke(
                cli, ["--json", "call", "create_rectangle", "--params", '{"width": 1, "height": 2}']
            )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["data"] == {"layer": "R9"}
        assert captured["url"] == "http://127.0.0.1:3333"
        assert captured["envelope"] == {
            "type": "execute_tool",
            "tool": "create_rectangle",
            "params": {"width": 1, "height": 2},
        }
        assert captured["timeout"] == pytest.approx(35.0)

    def test_relay_error_exits_nonzero(self, cli_runner: CliRunner) -> None:
        def fake_post(url: str, envelope: dict[str, Any], *, timeout: float) -> dict[str, Any]:
            return {"type": "error", "error": {"message": "No connected Sketch instances", "code": "NO_PEERS"}}

        with patch("sketchctx.commands.call.post_envelope", fake_post):
            result = cli_runner.invoke(cli, ["call", "create_text", "--params", '{"text": "Hi"}'])
        assert result.exit_code == 1
        assert "No connected Sketch instances" in result.stderr

    def test_unreachable(self, cli_runner: CliRunner) -> None:
        def fake_post(url: str, envelope: dict[str, Any], *, timeout: float) -> dict[str, Any]:
            raise httpx.ConnectError("connection refused")

        with patch("sketchctx.commands.call.post_envelope", fake_post):
            result = cli_runner.invoke(cli, ["call", "create_text", "--url", "http://127.0.0.1:9"])
        assert result.exit_code == 1
        assert "RELAY_UNREACHABLE" in result.stderr

    def test_bad_params_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["call", "create_text", "--params", "{text"])
        assert result.exit_code == 2
        assert "not valid JSON" in result.stderr
