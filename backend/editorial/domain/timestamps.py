"""Timestamp normalisation shared by filters and request schemas."""

from datetime import datetime, timezone


def to_utc(value: datetime | None) -> datetime | None:
    """Naive values are taken to be UTC; aware ones are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
