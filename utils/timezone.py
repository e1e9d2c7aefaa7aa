"""UTC-everywhere time handling for token expiry math."""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Raises ValueError if datetime is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime to UTC. Datetime must be timezone-aware."
        )
    return dt.astimezone(timezone.utc)


def from_epoch(seconds: int) -> datetime:
    """
    Convert absolute epoch seconds (as sent in `expires_at`) to a UTC datetime.

    Raises ValueError for negative values.
    """
    if seconds < 0:
        raise ValueError(f"Epoch seconds must be non-negative, got {seconds}")
    return datetime.fromtimestamp(seconds, tz=timezone.utc)
