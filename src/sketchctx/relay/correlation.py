"""Correlation table — request identifier → pending-response handle.

The table is the single source of truth linking "who asked" to "who
answers".  An originator may be a local awaitable (the command dispatcher)
or a remote peer (a plugin that sent a ``message`` frame with an ``id``);
the responder can sit on a different connection or transport surface.

INVARIANTS:
- At most one :class:`PendingRequest` per identifier at any instant.
- Every registration schedules exactly one timeout; every settlement
  (resolve, reject, expire) removes the entry and cancels that timeout.
- Settling an identifier that is no longer pending is a no-op.

All operations are synchronous: no entry is ever observed half-registered
or half-settled by a frame handled at the next suspension point.
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sketchctx.domain.errors import (
    DuplicateIdError,
    PeerCommandError,
    RequestTimeoutError,
    SketchCtxError,
    remote_error_message,
)
from sketchctx.domain.frames import RequestId, response_frame
from sketchctx.relay.peers import deliver

if TYPE_CHECKING:
    from sketchctx.relay.peers import Peer

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class Originator(ABC):
    """Whoever is waiting for a correlated response."""

    @abstractmethod
    def resolve(self, request_id: RequestId, result: Any) -> None: ...

    @abstractmethod
    def reject(self, request_id: RequestId, error: Any) -> None:
        """*error* is either an exception raised locally or a peer's error payload."""


class FutureOriginator(Originator):
    """A local caller awaiting an :class:`asyncio.Future`."""

    def __init__(self, future: asyncio.Future[Any]) -> None:
        self.future = future

    def resolve(self, request_id: RequestId, result: Any) -> None:
        if not self.future.done():
            self.future.set_result(result)

    def reject(self, request_id: RequestId, error: Any) -> None:
        if self.future.done():
            return
        if not isinstance(error, BaseException):
            error = PeerCommandError(
                remote_error_message(error),
                details={"request_id": request_id, "error": error},
            )
        self.future.set_exception(error)


class PeerOriginator(Originator):
    """A remote peer that sent a correlatable ``message`` frame.

    The outcome is written back as ``{"id", "type": "message", "result",
    "error"}``.  Writing is asynchronous, so it is handed to *spawn*.
    """

    def __init__(self, peer: Peer, spawn: Callable[[Awaitable[Any]], Any]) -> None:
        self.peer = peer
        self._spawn = spawn

    def resolve(self, request_id: RequestId, result: Any) -> None:
        self._send(response_frame(request_id, result=result))

    def reject(self, request_id: RequestId, error: Any) -> None:
        if isinstance(error, SketchCtxError):
            error = {"code": error.code, "message": error.message}
        self._send(response_frame(request_id, error=error))

    def _send(self, frame: dict[str, Any]) -> None:
        if self.peer.is_open:
            self._spawn(deliver(self.peer, frame))


@dataclass(frozen=True)
class PendingRequest:
    """One outstanding correlated request.  Immutable once created."""

    request_id: RequestId
    originator: Originator
    created_at: float = field(default_factory=time.monotonic)
    timer: asyncio.TimerHandle | None = None


class CorrelationTable:
    """Map of pending request identifiers to their originators."""

    def __init__(self, *, default_timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.default_timeout = default_timeout
        self._pending: dict[RequestId, PendingRequest] = {}

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def get(self, request_id: RequestId) -> PendingRequest | None:
        return self._pending.get(request_id)

    def register(
        self,
        request_id: RequestId,
        originator: Originator,
        timeout: float | None = None,
    ) -> PendingRequest:
        """Record a pending request and schedule its timeout.

        Raises:
            DuplicateIdError: *request_id* is already pending.
        """
        if request_id in self._pending:
            msg = f"Request ID already pending: {request_id}"
            raise DuplicateIdError(msg, details={"request_id": request_id})

        delay = self.default_timeout if timeout is None else timeout
        loop = asyncio.get_running_loop()
        timer = loop.call_later(delay, self.expire, request_id)
        entry = PendingRequest(request_id=request_id, originator=originator, timer=timer)
        self._pending[request_id] = entry
        logger.debug("Registered request %s (timeout %.1fs)", request_id, delay)
        return entry

    def resolve(self, request_id: RequestId, result: Any) -> bool:
        """Deliver *result* to the originator.  Returns whether an entry existed."""
        entry = self._take(request_id)
        if entry is None:
            return False
        entry.originator.resolve(request_id, result)
        return True

    def reject(self, request_id: RequestId, error: Any) -> bool:
        """Deliver *error* to the originator.  Returns whether an entry existed."""
        entry = self._take(request_id)
        if entry is None:
            return False
        entry.originator.reject(request_id, error)
        return True

    def expire(self, request_id: RequestId) -> None:
        """Timeout callback: reject a still-pending request with a timeout error."""
        if request_id not in self._pending:
            return
        logger.warning("Request %s timed out", request_id)
        self.reject(
            request_id,
            RequestTimeoutError("Request timed out", details={"request_id": request_id}),
        )

    def clear(self) -> None:
        """Cancel every timer and drop all entries (shutdown only)."""
        for entry in self._pending.values():
            if entry.timer is not None:
                entry.timer.cancel()
        self._pending.clear()

    def _take(self, request_id: RequestId) -> PendingRequest | None:
        entry = self._pending.pop(request_id, None)
        if entry is not None and entry.timer is not None:
            entry.timer.cancel()
        return entry
