"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from sketchctx.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    ours = logging.getLogger("sketchctx")
    our_level = ours.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    ours.setLevel(our_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("sketchctx").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_default_is_info(self) -> None:
        configure_logging()
        assert logging.getLogger("sketchctx").level == logging.INFO

    def test_json_mode_goes_to_stderr(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        structlog.get_logger("sketchctx.test").warning("relay event", peers=2)
        captured = capfd.readouterr()
        assert captured.out == ""
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "relay event"
        assert parsed["peers"] == 2
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "sketchctx.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_structured(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("sketchctx.relay.channels").debug("Peer ws-1 joined channel c")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Peer ws-1 joined channel c"
        assert parsed["level"] == "debug"

    def test_third_party_noise_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("httpx").info("HTTP Request: GET ...")
        logging.getLogger("uvicorn.access").info("127.0.0.1 GET /")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging()
        configure_logging(log_json=True)
        assert len(logging.getLogger().handlers) == 1
