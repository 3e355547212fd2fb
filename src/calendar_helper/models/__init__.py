"""Domain models for calendar events."""

from calendar_helper.models.event import Attendee, Event

__all__ = [
    "Attendee",
    "Event",
]
