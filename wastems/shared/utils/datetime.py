"""
UTC datetime helpers.

Every timestamp written to the document store is timezone-aware UTC;
use utc_now() instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime
from typing import Any


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Normalize a datetime to aware UTC.

    Naive values are assumed to be UTC already (the Firestore REST API and
    the in-memory store both hand back UTC).
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def isoformat_z(dt: datetime | None = None) -> str:
    """ISO-8601 with millisecond precision and a trailing Z (defaults to now)."""
    value = ensure_utc(dt) or utc_now()
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime | None:
    """Stored timestamp (datetime or ISO-8601 string) as aware UTC; None otherwise."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str):
        try:
            return ensure_utc(datetime.fromisoformat(value))
        except ValueError:
            return None
    return None
