"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, sketchctx.toml only contains
overrides.  A fresh setup needs no config file at all.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """[server] section — HTTP/SSE/WebSocket listener."""

    model_config = {"frozen": True}

    host: str = "127.0.0.1"
    port: int = 3333
    stdio: bool = False


class RelayConfig(BaseModel):
    """[relay] section."""

    model_config = {"frozen": True}

    request_timeout: float = Field(default=30.0, gt=0)
    welcome: str = "Connected to Sketch MCP server"


class SketchConfig(BaseModel):
    """[sketch] section — document sources."""

    model_config = {"frozen": True}

    api_key: str | None = None
    api_base: str = "https://api.sketch.cloud/v1"
    local_file: Path | None = None
    http_timeout: float = 60.0


class McpConfig(BaseModel):
    """[mcp] section."""

    model_config = {"frozen": True}

    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000
