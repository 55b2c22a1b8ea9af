"""Datetime utility functions for timezone handling."""
from datetime import date, datetime, UTC
from typing import Optional


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is timezone-aware in UTC.

    Client timestamps may arrive timezone-naive; those are treated as UTC.
    Aware datetimes in another zone are converted to UTC.

    Args:
        dt: Datetime to normalize (can be None)

    Returns:
        UTC-aware datetime or None if input was None

    Example:
        >>> naive_dt = datetime(2025, 1, 1, 12, 0, 0)
        >>> aware_dt = ensure_utc(naive_dt)
        >>> aware_dt.tzinfo == UTC
        True

        >>> ensure_utc(None) is None
        True
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_now() -> datetime:
    """Current time as a UTC-aware datetime."""
    return datetime.now(UTC)


def utc_date(dt: Optional[datetime]) -> Optional[date]:
    """Calendar day of ``dt`` in UTC."""
    normalized = ensure_utc(dt)
    return normalized.date() if normalized else None
