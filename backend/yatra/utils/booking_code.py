"""Human-friendly booking reference codes."""

from __future__ import annotations

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_uppercase


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_booking_code(prefix: str = "BK") -> str:
    """Return ``PREFIX-<base36 millis>-<6 random chars>``."""
    timestamp = _base36(time.time_ns() // 1_000_000)
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(6))
    return f"{prefix}-{timestamp}-{random_part}"
