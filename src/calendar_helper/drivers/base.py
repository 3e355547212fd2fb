"""Base calendar driver abstraction.

This module defines the interface every calendar driver implements and the
exceptions drivers raise on top of the errors of their vendor SDK.

## Canonical Data Format

Drivers translate their vendor's event resources into the provider-neutral
models in `calendar_helper.models`:

- `Event`: title, description, location, status, start/end, all-day flag,
  recurrence rule and attendees
- `Attendee`: name, e-mail, response status and comment

### Dates
- Timed events: RFC3339 strings (`2024-01-01T09:00:00+00:00`)
- All-day events: `YYYY-MM-DD`, with an exclusive end date

## Not Found

Reading or deleting an event that does not exist is not an error: `event()`
returns `None` and `delete_event()` returns `False`. Every other vendor error
propagates unchanged.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from calendar_helper.models.event import Event


class CalendarError(Exception):
    """Base exception for calendar driver errors."""

    def __init__(
        self,
        message: str,
        driver: str,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.driver = driver
        self.status_code = status_code


class ConfigurationError(CalendarError):
    """Raised when a driver cannot be built from the given settings."""

    pass


class CalendarDriver(ABC):
    """Abstract base class for calendar drivers.

    Attributes:
        name: Driver name used in errors and logs
        calendar_id: Calendar the driver currently operates on

    Example:
        ```python
        class MyDriver(CalendarDriver):
            name = "my_driver"

            def event(self, event_id):
                data = self._client.fetch(self.calendar_id, event_id)
                return Event.from_api(data, self.calendar_id)
            ...
        ```
    """

    name: str

    def __init__(self, calendar_id: str):
        self.calendar_id = calendar_id

    def set_calendar_id(self, calendar_id: str | None) -> CalendarDriver:
        """Override the calendar ID. Empty values are ignored.

        Returns:
            The driver, for chaining
        """
        if calendar_id:
            self.calendar_id = calendar_id
        return self

    @abstractmethod
    def event(self, event_id: str) -> Event | None:
        """Get a single event, or None if it does not exist."""
        pass

    @abstractmethod
    def events(self, **params: Any) -> list[Event]:
        """List events on the current calendar.

        Args:
            **params: Vendor list parameters (time bounds, query, ...)
        """
        pass

    @abstractmethod
    def recurrences(self, event_id: str, **params: Any) -> list[Event]:
        """List the instances of a recurring event."""
        pass

    @abstractmethod
    def specific_events(
        self,
        event_ids: Iterable[str],
        with_recurrences: bool = False,
        **recurrence_params: Any,
    ) -> list[Event]:
        """Get several events at once.

        Args:
            event_ids: IDs of the events to fetch
            with_recurrences: Also fetch the instances of each event
            **recurrence_params: Parameters for the instance requests

        Returns:
            Events in request order; missing events are left out
        """
        pass

    @abstractmethod
    def create_event(self, event: Event) -> Event:
        """Create an event and return it as stored by the provider."""
        pass

    @abstractmethod
    def update_event(self, event: Event) -> Event:
        """Update an event and return it as stored by the provider."""
        pass

    @abstractmethod
    def delete_event(self, event_id: str) -> bool:
        """Delete an event. Returns False if it does not exist."""
        pass
