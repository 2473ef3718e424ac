"""call — invoke a tool on a running relay over HTTP."""

from __future__ import annotations

import json
from typing import Any

import click
import httpx

from sketchctx.commands._base import SketchCommand
from sketchctx.commands._context import AppContext
from sketchctx.services.result import ServiceError, ServiceResult


def post_envelope(
    url: str,
    envelope: dict[str, Any],
    *,
    timeout: float,
    transport: httpx.BaseTransport | None = None,
) -> dict[str, Any]:
    """POST one envelope to ``{url}/messages`` and return the decoded body."""
    with httpx.Client(base_url=url, timeout=timeout, transport=transport) as client:
        response = client.post("/messages", json=envelope)
        body: dict[str, Any] = response.json()
    return body


def envelope_result(tool: str, body: dict[str, Any]) -> ServiceResult:
    """Translate a ``tool_result`` or ``error`` envelope into a ServiceResult."""
    if body.get("type") == "tool_result":
        return ServiceResult(ok=True, op=tool, data=body.get("result") or {})
    error = body.get("error")
    if not isinstance(error, dict):
        error = {"message": str(error)}
    return ServiceResult(
        ok=False,
        op=tool,
        error=ServiceError(
            code=error.get("code", "UNKNOWN_ERROR"),
            message=error.get("message", "Unknown error"),
            detail=error.get("details") or {},
        ),
    )


@click.command(
    cls=SketchCommand,
    examples="""\
  sketchctx call create_rectangle --params '{"width": 120, "height": 80, "color": "#ff0066"}'
  sketchctx call create_text --params '{"text": "Hello"}' --url http://127.0.0.1:4000
  sketchctx --json call list_components --params '{"url": "/abs/app.sketch"}'""",
)
@click.argument("tool")
@click.option("--params", "params_json", default="{}", help="Tool parameters as a JSON object.")
@click.option("--url", default=None, help="Relay base URL (default from [server] settings).")
@click.pass_obj
def call(app: AppContext, tool: str, params_json: str, url: str | None) -> None:
    """Send an execute_tool envelope to a running relay and print the result."""
    try:
        params = json.loads(params_json)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--params") from exc

    server = app.settings.server
    base_url = url or f"http://{server.host}:{server.port}"
    envelope = {"type": "execute_tool", "tool": tool, "params": params}
    try:
        body = post_envelope(base_url, envelope, timeout=app.settings.relay.request_timeout + 5)
    except (httpx.HTTPError, ValueError) as exc:
        app.emit(
            ServiceResult(
                ok=False,
                op=tool,
                error=ServiceError(
                    code="RELAY_UNREACHABLE",
                    message=f"Could not reach relay at {base_url}: {exc}",
                ),
            )
        )
        return
    app.emit(envelope_result(tool, body))
