"""
Core Utilities.

Shared utility functions used across the backend.
"""

from datetime import datetime, timedelta, timezone

_TICK = timedelta(microseconds=1)


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive
    and assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def advance_timestamp(previous: datetime) -> datetime:
    """
    Return a timestamp strictly after ``previous``.

    Normally the current time; if the clock has not moved past
    ``previous`` (coarse clocks, rapid successive writes) the previous
    value plus one microsecond.
    """
    now = utc_now()
    if now > previous:
        return now
    return previous + _TICK
