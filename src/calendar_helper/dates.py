"""Date conversion helpers for the Google Calendar API.

Google expects three different date shapes:

- Timed events: RFC3339, e.g. ``2024-01-01T09:30:00-05:00``
- All-day events: a plain ``YYYY-MM-DD`` date
- Recurrence rules (``UNTIL=``): RFC2445, e.g. ``20240101T143000Z``

Inputs may be Unix timestamps (``int``), ``datetime``/``date`` objects or
free-form strings understood by ``dateutil``. Values without an offset are
interpreted in the given time zone, UTC by default.
"""

from __future__ import annotations

import sys
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any

from dateutil import parser as dateutil_parser
from dateutil import tz as dateutil_tz

RFC2445_FORMAT = "%Y%m%dT%H%M%SZ"
ALL_DAY_FORMAT = "%Y-%m-%d"

_MIN_TIMESTAMP = -sys.maxsize - 1
_MAX_TIMESTAMP = sys.maxsize


class DateParseError(ValueError):
    """Raised when a value cannot be interpreted as a date."""


def is_valid_timestamp(value: Any) -> bool:
    """Check if the value is an integer Unix timestamp.

    Numeric strings are not timestamps; they go through the date parser.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return _MIN_TIMESTAMP <= value <= _MAX_TIMESTAMP


def resolve_time_zone(time_zone: str | tzinfo | None) -> tzinfo:
    """Resolve a zone name to a tzinfo, defaulting to UTC."""
    if time_zone is None:
        return timezone.utc
    if isinstance(time_zone, tzinfo):
        return time_zone
    resolved = dateutil_tz.gettz(time_zone)
    if resolved is None:
        raise DateParseError(f"Unknown time zone: {time_zone}")
    return resolved


def to_datetime(value: Any, time_zone: str | tzinfo | None = None) -> datetime:
    """Convert a timestamp, date or date string into an aware datetime.

    Args:
        value: Unix timestamp, datetime, date or free-form date string
        time_zone: Zone for timestamps and naive values

    Returns:
        Timezone-aware datetime

    Raises:
        DateParseError: If the value cannot be interpreted
    """
    zone = resolve_time_zone(time_zone)

    if is_valid_timestamp(value):
        try:
            return datetime.fromtimestamp(value, zone)
        except (OverflowError, OSError, ValueError) as e:
            raise DateParseError(f"Timestamp out of range: {value}") from e

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = dateutil_parser.parse(value)
        except (ValueError, OverflowError) as e:
            raise DateParseError(f"Could not parse date: {value!r}") from e
    else:
        raise DateParseError(f"Could not parse date: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone)
    return parsed


def str_to_rfc3339(
    value: Any,
    all_day: bool = False,
    is_end: bool = False,
    time_zone: str | tzinfo | None = None,
) -> str:
    """Format a date for an event's start or end.

    All-day events only accept ``YYYY-MM-DD``. Google treats the end date of
    an all-day event as exclusive, so an event running January 1st through
    January 3rd must end on the 4th; pass ``is_end=True`` for the end date
    and a day is added.

    Args:
        value: Unix timestamp, datetime, date or date string
        all_day: Format as an all-day date
        is_end: Value is the end of an all-day event
        time_zone: Zone for timestamps and naive values

    Returns:
        RFC3339 timestamp, or ``YYYY-MM-DD`` for all-day events
    """
    moment = to_datetime(value, time_zone)

    if all_day:
        if is_end:
            moment += timedelta(days=1)
        return moment.strftime(ALL_DAY_FORMAT)

    return moment.isoformat(timespec="seconds")


def str_to_rfc2445(value: Any, time_zone: str | tzinfo | None = None) -> str:
    """Format a date for use inside a recurrence rule, in UTC."""
    moment = to_datetime(value, time_zone)
    return moment.astimezone(timezone.utc).strftime(RFC2445_FORMAT)
