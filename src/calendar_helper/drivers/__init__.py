"""Calendar drivers.

A driver translates between the provider-neutral `Event`/`Attendee` models
and one calendar provider's API.

## Drivers

- **google**: Google Calendar API v3 through `google-api-python-client`

## Operations

- Get, list, create, update and delete events
- List the instances of a recurring event
- Fetch many events (optionally with their instances) in batch requests
"""

from calendar_helper.drivers.base import (
    CalendarDriver,
    CalendarError,
    ConfigurationError,
)
from calendar_helper.drivers.google import GoogleCalendarDriver

__all__ = [
    "CalendarDriver",
    "CalendarError",
    "ConfigurationError",
    "GoogleCalendarDriver",
]
