"""Correlation identifier generation.

INVARIANT: an identifier is unique for the lifetime of its pending request.
Identifiers are opaque to peers and must be echoed back verbatim.
"""

from __future__ import annotations

import secrets
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_request_id() -> str:
    """Return a fresh request ID: base36 millisecond clock + 8 random chars.

    Examples:
        >>> len(generate_request_id()) > 8
        True
    """
    stamp = _base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(8))
    return f"{stamp}{suffix}"
