"""Relay frame models — inbound tagged union and outbound builders.

Inbound frames arrive as loosely-typed JSON objects.  ``parse_frame``
validates them at the boundary and returns exactly one of
:class:`JoinFrame`, :class:`MessageFrame`, :class:`ResponseFrame` or
:class:`UnknownFrame`, so the protocol handler only ever sees typed frames.

Wire shape: ``{type, channel?, id?, message|result|error?}``.  A response
echoes the original ``id`` verbatim.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Tag, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from sketchctx.domain.errors import ValidationError

RequestId = str | int


class _Frame(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")


class JoinFrame(_Frame):
    """``{"type": "join", "channel": ...}`` — subscribe the sender to a channel."""

    type: Literal["join"]
    channel: str | None = None


class MessageFrame(_Frame):
    """``{"type": "message", "channel": ..., "id"?: ...}`` — broadcast to a channel."""

    type: Literal["message"]
    channel: str
    id: RequestId | None = None
    message: Any = None


class ResponseFrame(_Frame):
    """A frame carrying an ``id`` that may answer a pending request."""

    id: RequestId
    type: str | None = None
    result: Any = None
    error: Any = None

    @property
    def has_outcome(self) -> bool:
        """True when the frame explicitly carries ``result`` or ``error``."""
        return "result" in self.model_fields_set or "error" in self.model_fields_set

    @property
    def looks_like_reply(self) -> bool:
        """Reply-shaped: no explicit type, or an explicit result/error payload."""
        return self.type is None or self.has_outcome

    @property
    def failed(self) -> bool:
        return self.error is not None


class UnknownFrame(_Frame):
    """Anything the relay does not understand."""

    type: Any = None


def _frame_kind(raw: Any) -> str:
    if not isinstance(raw, dict):
        return "unknown"
    kind = raw.get("type")
    if kind == "join":
        return "join"
    if kind == "message" and raw.get("channel"):
        return "message"
    if raw.get("id") not in (None, ""):
        return "response"
    return "unknown"


InboundFrame = Annotated[
    Annotated[JoinFrame, Tag("join")]
    | Annotated[MessageFrame, Tag("message")]
    | Annotated[ResponseFrame, Tag("response")]
    | Annotated[UnknownFrame, Tag("unknown")],
    Discriminator(_frame_kind),
]

_frame_adapter: TypeAdapter[Any] = TypeAdapter(InboundFrame)


def parse_frame(raw: Any) -> JoinFrame | MessageFrame | ResponseFrame | UnknownFrame:
    """Validate a decoded JSON value into a typed inbound frame.

    Raises:
        ValidationError: *raw* is not a JSON object or a field has the wrong type.
    """
    if not isinstance(raw, dict):
        raise ValidationError("Invalid message format", details={"received": type(raw).__name__})
    try:
        return _frame_adapter.validate_python(raw)  # type: ignore[no-any-return]
    except PydanticValidationError as exc:
        raise ValidationError(
            "Invalid message format",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


# ---------------------------------------------------------------------------
# Outbound frames
# ---------------------------------------------------------------------------


def connected_frame(message: str) -> dict[str, Any]:
    """Acknowledgement sent to every new bidirectional peer."""
    return {"type": "connected", "message": message}


def connection_success_frame() -> dict[str, Any]:
    """Acknowledgement sent to every new push-only sink."""
    return {"type": "connection_success"}


def error_frame(message: str, *, code: str = "VALIDATION_ERROR") -> dict[str, Any]:
    """Local error reported to the immediate sender only."""
    return {"type": "error", "message": message, "code": code}


def join_ack_frame(channel: str) -> dict[str, Any]:
    return {"type": "system", "channel": channel, "message": {"result": True}}


def channel_message_frame(channel: str, message: Any) -> dict[str, Any]:
    return {"type": "message", "channel": channel, "message": message}


def response_frame(request_id: RequestId, *, result: Any = None, error: Any = None) -> dict[str, Any]:
    """Routed reply delivered back to the originator of a request.

    ``error`` is only present on failure.
    """
    frame: dict[str, Any] = {"id": request_id, "type": "message", "result": result}
    if error is not None:
        frame["error"] = error
    return frame


def command_message(request_id: str, command: str, params: dict[str, Any]) -> dict[str, Any]:
    """Payload of a relayed design-tool command."""
    return {"id": request_id, "command": command, "params": params}
