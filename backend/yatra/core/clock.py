"""Time helpers shared by pricing and booking services."""

from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


def coerce_utc(dt: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
