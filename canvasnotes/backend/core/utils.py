"""
Core Utilities.

Shared utility functions used across the backend.
"""

from datetime import datetime, timedelta, timezone

TIMESTAMP_RESOLUTION = timedelta(microseconds=1)


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive
    and assumed to be UTC.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_now_after(previous: datetime | None) -> datetime:
    """
    Return the current UTC time, bumped past ``previous`` if needed.

    Two mutations in the same clock tick would otherwise share a
    timestamp; the result is always strictly later than ``previous``.
    """
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + TIMESTAMP_RESOLUTION
    return now
