"""Boundary datetime handling shared by request schemas."""

from datetime import datetime, timezone


def require_utc(value: datetime | None) -> datetime | None:
    """Reject naive datetimes; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("datetime must include a timezone offset (e.g. 'Z')")
    return value.astimezone(timezone.utc)
