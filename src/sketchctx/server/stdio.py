"""Line-delimited JSON surface on standard input.

Each line is one editor envelope.  Lines are answered concurrently, and
every answer is broadcast to all live peers and sinks rather than written
back to stdout.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any, TextIO

from sketchctx.server.envelopes import error_envelope, handle_envelope

if TYPE_CHECKING:
    from sketchctx.relay.multiplexer import ConnectionMultiplexer
    from sketchctx.services.dispatcher import CommandDispatcher

logger = logging.getLogger(__name__)


async def stdin_lines(stream: TextIO | None = None) -> AsyncIterator[str]:
    """Yield lines from *stream* (stdin by default) without blocking the loop."""
    source = stream or sys.stdin
    while True:
        line = await asyncio.to_thread(source.readline)
        if not line:
            return
        yield line


async def answer_line(dispatcher: CommandDispatcher, line: str) -> dict[str, Any]:
    try:
        message = json.loads(line)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed stdin line")
        return error_envelope("Invalid message format", code="VALIDATION_ERROR")
    _, body = await handle_envelope(dispatcher, message)
    return body


async def run_stdio(
    dispatcher: CommandDispatcher,
    multiplexer: ConnectionMultiplexer,
    lines: AsyncIterator[str],
) -> int:
    """Answer every line from *lines*; return how many were processed."""

    async def _respond(line: str) -> None:
        # A failing line must not cancel its siblings in the task group.
        try:
            body = await answer_line(dispatcher, line)
        except Exception as exc:
            logger.exception("Unhandled error while answering stdin line")
            body = error_envelope(str(exc) or type(exc).__name__)
        delivered = await multiplexer.broadcast_all(body)
        logger.debug("stdio answer %s delivered to %d target(s)", body.get("type"), delivered)

    handled = 0
    async with asyncio.TaskGroup() as group:
        async for raw in lines:
            line = raw.strip()
            if not line:
                continue
            group.create_task(_respond(line))
            handled += 1
    logger.info("stdin closed after %d message(s)", handled)
    return handled
