"""Shared pytest fixtures and test helpers for sketchctx tests."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from sketchctx.config.settings import SketchSettings
from sketchctx.infrastructure.container import build_container
from sketchctx.relay.peers import Peer
from sketchctx.relay.state import RelayState
from sketchctx.server.runtime import Runtime, build_runtime

_ENV_NAMES = ("SKETCH_API_KEY", "PORT", "LOCAL_SKETCH_PATH")


class FakePeer(Peer):
    """In-memory peer recording every payload it is sent."""

    kind = "fake"

    def __init__(self, *, open: bool = True, fail: bool = False) -> None:
        super().__init__()
        self.open = open
        self.fail = fail
        self.sent: list[dict[str, Any]] = []

    @property
    def is_open(self) -> bool:
        return self.open

    async def send(self, payload: dict[str, Any]) -> None:
        if self.fail:
            raise ConnectionError("transport broken")
        self.sent.append(payload)

    def of_type(self, kind: str) -> list[dict[str, Any]]:
        return [p for p in self.sent if p.get("type") == kind]


# ---------------------------------------------------------------------------
# Sample document
# ---------------------------------------------------------------------------

SAMPLE_DOCUMENT: dict[str, Any] = {"_class": "document", "do_objectID": "DOC", "name": "Doc"}

SAMPLE_PAGES: dict[str, dict[str, Any]] = {
    "P1": {
        "_class": "page",
        "do_objectID": "P1",
        "name": "Page 1",
        "layers": [
            {
                "_class": "artboard",
                "do_objectID": "A1",
                "name": "Home",
                "layers": [
                    {"_class": "rectangle", "do_objectID": "R1", "name": "Box"},
                    {
                        "_class": "symbolMaster",
                        "do_objectID": "S1",
                        "name": "Button",
                        "frame": {"x": 0, "y": 0, "width": 120, "height": 40},
                    },
                ],
            },
            {"_class": "symbolMaster", "do_objectID": "S2", "name": "Icon"},
        ],
    },
    "P2": {
        "_class": "page",
        "do_objectID": "P2",
        "name": "Page 2",
        "layers": [{"_class": "symbolMaster", "do_objectID": "S3", "name": "Card"}],
    },
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate tests from the developer's env vars and config files."""
    for name in list(os.environ):
        if name.startswith("SKETCHCTX_") or name in _ENV_NAMES:
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_peer() -> Callable[..., FakePeer]:
    return FakePeer


@pytest.fixture
def relay_state() -> RelayState:
    return RelayState(request_timeout=5.0)


@pytest.fixture
def sketch_file(tmp_path: Path) -> Path:
    """A two-page ``.sketch`` archive on disk."""
    path = tmp_path / "sample.sketch"
    path.write_bytes(build_container(SAMPLE_DOCUMENT, meta={"version": 146}, pages=SAMPLE_PAGES))
    return path


@pytest.fixture
def settings(sketch_file: Path) -> SketchSettings:
    return SketchSettings(
        relay={"request_timeout": 1.0},
        sketch={"local_file": sketch_file},
    )


@pytest.fixture
def runtime(settings: SketchSettings) -> Runtime:
    return build_runtime(settings)
