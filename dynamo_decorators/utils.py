"""
Timestamp utilities.

Timestamps written by the library are UTC ISO-8601 strings with millisecond
precision and a ``Z`` suffix (``2024-01-01T10:00:00.000Z``), so they sort
lexicographically and can be used as sort keys.
"""

from datetime import datetime, timezone
from typing import Optional


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC.

    Naive datetimes are assumed to already be in UTC.

    Examples:
        >>> dt = datetime(2024, 1, 1, 10, 0)
        >>> to_utc(dt)  # -> 2024-01-01 10:00:00+00:00
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_timestamp(dt: Optional[datetime] = None) -> str:
    """Format ``dt`` (default: now) as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Examples:
        >>> utc_timestamp(datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc))
        '2024-01-01T10:00:00.000Z'
    """
    dt = to_utc(dt) if dt is not None else datetime.now(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
