"""Error taxonomy shared by the relay, document engine, and dispatcher.

Every error carries a machine-checkable ``code`` and a human-readable
message.  Errors are local to the request that raised them: front ends
convert them into error envelopes and keep serving.
"""

from __future__ import annotations

from typing import Any

GENERIC_SUGGESTION = "Please try again later or contact support for assistance."


class SketchCtxError(Exception):
    """Base class for all sketchctx errors."""

    code = "UNKNOWN_ERROR"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}


class ValidationError(SketchCtxError):
    """Malformed frame or missing required field."""

    code = "VALIDATION_ERROR"


class NoPeersError(SketchCtxError):
    """A relayed command has no connected peer to go to."""

    code = "NO_PEERS"


class ChannelNotFoundError(SketchCtxError):
    """Broadcast target channel does not exist."""

    code = "CHANNEL_NOT_FOUND"


class RequestTimeoutError(SketchCtxError, TimeoutError):
    """A relayed command was not answered before its deadline."""

    code = "TIMEOUT"


class DuplicateIdError(SketchCtxError):
    """A correlation identifier is already pending."""

    code = "DUPLICATE_ID"


class InvalidFormatError(SketchCtxError):
    """Document container is malformed."""

    code = "INVALID_FORMAT"


class NodeNotFoundError(SketchCtxError):
    """Requested node ID does not exist in the document."""

    code = "NODE_NOT_FOUND"


class UnknownToolError(SketchCtxError):
    """Tool name is not in the catalog."""

    code = "UNKNOWN_TOOL"


class DocumentSourceError(SketchCtxError):
    """A document could not be fetched from disk or Sketch Cloud."""

    code = "DOCUMENT_SOURCE_ERROR"


class ConfigurationError(SketchCtxError):
    """Required configuration (e.g. the Sketch API key) is missing."""

    code = "CONFIGURATION_ERROR"


class PeerCommandError(SketchCtxError):
    """The design-tool peer answered a relayed command with an error."""

    code = "PEER_ERROR"


class UnknownMessageError(SketchCtxError):
    """Envelope or frame type is not recognised."""

    code = "UNKNOWN_MESSAGE"


def remote_error_message(error: Any) -> str:
    """Extract a message from an ``error`` payload sent back by a peer."""
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(error)
