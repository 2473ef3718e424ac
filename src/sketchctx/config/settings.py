"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SKETCHCTX_*`` prefix (``SKETCHCTX_SERVER__PORT``)
  3. Legacy env   — ``SKETCH_API_KEY``, ``PORT``, ``LOCAL_SKETCH_PATH``
  4. TOML file    — ``sketchctx.toml`` discovered via walk-up
  5. Code defaults — baked into the section models

Uses Pydantic Settings v2 with custom sources for the TOML file and the
legacy environment variable names.
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any, ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from sketchctx.config.discovery import find_config
from sketchctx.config.models import McpConfig, RelayConfig, ServerConfig, SketchConfig

#: legacy env var → (section, field)
LEGACY_ENV_VARS: dict[str, tuple[str, str]] = {
    "SKETCH_API_KEY": ("sketch", "api_key"),
    "LOCAL_SKETCH_PATH": ("sketch", "local_file"),
    "PORT": ("server", "port"),
}


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``sketchctx.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


class LegacyEnvSource(PydanticBaseSettingsSource):
    """Map the unprefixed environment variable names onto settings sections."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        data = self()
        return data.get(field_name), field_name, field_name in data

    def __call__(self) -> dict[str, Any]:
        data: dict[str, dict[str, Any]] = {}
        for env_name, (section, key) in LEGACY_ENV_VARS.items():
            value = os.environ.get(env_name)
            if value:
                data.setdefault(section, {})[key] = value
        return data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class SketchSettings(BaseSettings):
    """Unified settings for the sketchctx CLI and servers.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.  Stored in
    ``click.Context.obj`` at the CLI root level.

    Attributes:
        config_path: The TOML file that was loaded, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SKETCHCTX_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    server: ServerConfig = Field(default_factory=ServerConfig)
    relay: RelayConfig = Field(default_factory=RelayConfig)
    sketch: SketchConfig = Field(default_factory=SketchConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)

    # Retained for type-checker visibility; not used at runtime.
    _toml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert legacy env and TOML sources between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            LegacyEnvSource(settings_cls),
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> SketchSettings:
        """Construct settings from CLI invocation.

        Discovers ``sketchctx.toml`` via walk-up from *start* (or uses an
        explicit *config_path*) and merges CLI flags as highest-priority
        overrides.  Section overrides are passed as dicts, e.g.
        ``server={"port": 4000}``.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

    def with_overrides(self, **sections: dict[str, Any]) -> SketchSettings:
        """Return a copy with non-None section fields replaced.

        ``settings.with_overrides(server={"port": 4000, "host": None})``
        changes the port and keeps the configured host.
        """
        update: dict[str, Any] = {}
        for name, values in sections.items():
            changes = {k: v for k, v in values.items() if v is not None}
            if changes:
                section = getattr(self, name)
                update[name] = section.model_copy(update=changes)
        return self.model_copy(update=update)
