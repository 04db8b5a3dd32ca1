"""
DateTime utilities for consistent timezone handling.
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get the current UTC time with timezone awareness.

    Returns:
        datetime: Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime, convert an aware one."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_unix_ms(dt: Optional[datetime] = None) -> int:
    """
    Milliseconds since the epoch for ``dt`` (now when omitted).

    Used for human-sortable storage keys.
    """
    return int(ensure_utc(dt or utc_now()).timestamp() * 1000)


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime."""
    return ensure_utc(datetime.fromisoformat(value))
