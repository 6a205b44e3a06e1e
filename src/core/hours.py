"""
Duration and rounding helpers.
"""

import math
from datetime import datetime, timedelta, timezone, tzinfo

MS_PER_HOUR = 3_600_000


def round_hours(value: float) -> float:
    """
    Round to 2 decimal places, halves away from zero.

    Scales by 100, rounds to the nearest integer and scales back. Python's
    built-in round() is banker's rounding, so it is not used here.
    """
    scaled = math.floor(abs(value) * 100 + 0.5)
    return math.copysign(scaled / 100, value)


def localize(dt: datetime, tz: tzinfo) -> datetime:
    """Convert to the report timezone; naive datetimes are taken as already local."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def duration_ms(start: datetime, end: datetime) -> float:
    """
    Milliseconds between two instants (negative if end precedes start).

    Both sides are compared in UTC: subtracting datetimes that share a zone
    uses wall-clock time and would miss daylight saving changes.
    """
    return (end.astimezone(timezone.utc) - start.astimezone(timezone.utc)) / timedelta(milliseconds=1)


def compute_hours(start: datetime, end: datetime) -> float:
    """Hours between two instants, rounded to 2 places."""
    return round_hours(duration_ms(start, end) / MS_PER_HOUR)
