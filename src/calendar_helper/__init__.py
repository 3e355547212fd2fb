"""Calendar helper: a provider-neutral event model over Google Calendar."""

from calendar_helper.dates import (
    DateParseError,
    is_valid_timestamp,
    str_to_rfc2445,
    str_to_rfc3339,
)
from calendar_helper.drivers import (
    CalendarDriver,
    CalendarError,
    ConfigurationError,
    GoogleCalendarDriver,
)
from calendar_helper.models import Attendee, Event

__version__ = "0.1.0"

__all__ = [
    "Attendee",
    "CalendarDriver",
    "CalendarError",
    "ConfigurationError",
    "DateParseError",
    "Event",
    "GoogleCalendarDriver",
    "is_valid_timestamp",
    "str_to_rfc2445",
    "str_to_rfc3339",
]
