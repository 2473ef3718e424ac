"""Editor message envelopes shared by the HTTP and stdio surfaces.

Envelope types:

- ``{"type": "ping"}`` → ``{"type": "pong"}``
- ``{"type": "get_tools"}`` → ``{"type": "tools", "tools": [...]}``
- ``{"type": "execute_tool", "id"?, "tool", "params"}`` →
  ``{"type": "tool_result", "id", "result"}``

Failures become ``{"type": "error", "error": {"message", "code",
"details", "suggestion"}}`` with an HTTP status chosen from the error code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sketchctx.domain.errors import GENERIC_SUGGESTION

if TYPE_CHECKING:
    from sketchctx.services.dispatcher import CommandDispatcher
    from sketchctx.services.result import ServiceError

_STATUS_BY_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "UNKNOWN_TOOL": 400,
    "UNKNOWN_MESSAGE": 400,
    "NODE_NOT_FOUND": 404,
    "NO_PEERS": 503,
    "TIMEOUT": 504,
}


def error_envelope(
    message: str,
    *,
    code: str = "UNKNOWN_ERROR",
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        "type": "error",
        "error": {
            "message": message,
            "code": code,
            "details": details or {},
            "suggestion": GENERIC_SUGGESTION,
        },
    }


def service_error_envelope(error: ServiceError) -> dict[str, Any]:
    return error_envelope(error.message, code=error.code, details=error.detail)


def status_for(code: str) -> int:
    return _STATUS_BY_CODE.get(code, 500)


async def handle_envelope(dispatcher: CommandDispatcher, message: Any) -> tuple[int, dict[str, Any]]:
    """Answer one editor envelope.  Returns ``(http_status, body)``."""
    if not isinstance(message, dict):
        return 400, error_envelope("Invalid message format", code="VALIDATION_ERROR")

    kind = message.get("type")
    if kind == "ping":
        return 200, {"type": "pong"}
    if kind == "get_tools":
        return 200, {"type": "tools", "tools": dispatcher.tools}
    if kind == "execute_tool":
        result = await dispatcher.invoke(str(message.get("tool")), message.get("params"))
        if not result.ok:
            if result.error is None:
                return 500, error_envelope(f"{result.op} failed")
            return status_for(result.error.code), service_error_envelope(result.error)
        return 200, {"type": "tool_result", "id": message.get("id"), "result": result.data}
    return 400, error_envelope(f"Unknown message type: {kind}", code="UNKNOWN_MESSAGE")
