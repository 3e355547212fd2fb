"""Provider-neutral event models.

Events and attendees are rebuilt from the provider on every read. Each keeps
the raw provider resource in ``api_object`` so an update can send back the
fields this model does not know about.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Attendee:
    """An attendee of a calendar event."""

    id: str | None = None
    name: str | None = None
    status: str | None = None  # needsAction, declined, tentative, accepted
    email: str | None = None
    comment: str | None = None
    event: Event | None = field(default=None, repr=False, compare=False)
    api_object: dict[str, Any] | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_api(cls, data: dict[str, Any], event: Event | None = None) -> Attendee:
        """Create from a Google Calendar attendee resource."""
        return cls(
            id=data.get("id"),
            name=data.get("displayName"),
            status=data.get("responseStatus"),
            email=data.get("email"),
            comment=data.get("comment"),
            event=event,
            api_object=data,
        )

    def to_api_body(self) -> dict[str, Any]:
        """Convert to an attendee resource, keeping unknown fields."""
        body = copy.deepcopy(self.api_object) if self.api_object else {}

        if self.email is not None:
            body["email"] = self.email
        if self.name is not None:
            body["displayName"] = self.name
        if self.status is not None:
            body["responseStatus"] = self.status
        if self.comment is not None:
            body["comment"] = self.comment

        return body


@dataclass
class Event:
    """A calendar event.

    ``start`` and ``end`` hold the provider's string form: RFC3339 for timed
    events and ``YYYY-MM-DD`` for all-day events. Use
    :func:`calendar_helper.dates.str_to_rfc3339` to produce them.
    """

    id: str | None = None
    calendar_id: str | None = None
    parent_id: str | None = None
    title: str | None = None
    description: str | None = None
    location: str | None = None
    status: str | None = None  # confirmed, tentative, cancelled
    start: str | None = None
    end: str | None = None
    time_zone: str | None = None
    all_day: bool = False
    rrule: str | None = None
    is_recurrence: bool = False
    attendees: list[Attendee] = field(default_factory=list)
    api_object: dict[str, Any] | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_api(cls, data: dict[str, Any], calendar_id: str | None = None) -> Event:
        """Create from a Google Calendar event resource."""
        start_data = data.get("start") or {}
        end_data = data.get("end") or {}

        # Timed events carry dateTime, all-day events only date
        all_day = not start_data.get("dateTime")
        key = "date" if all_day else "dateTime"

        recurrence = data.get("recurrence") or []
        parent_id = data.get("recurringEventId")

        event = cls(
            id=data.get("id"),
            calendar_id=calendar_id,
            parent_id=parent_id,
            title=data.get("summary"),
            description=data.get("description"),
            location=data.get("location"),
            status=data.get("status"),
            start=start_data.get(key),
            end=end_data.get(key),
            time_zone=start_data.get("timeZone"),
            all_day=all_day,
            rrule=recurrence[0] if recurrence else None,
            is_recurrence=bool(parent_id),
            api_object=data,
        )

        event.attendees = [
            Attendee.from_api(attendee, event) for attendee in data.get("attendees", [])
        ]

        return event

    def to_api_body(self, include_api_object: bool = True) -> dict[str, Any]:
        """Convert to an event resource for insert or update.

        Starts from a copy of ``api_object`` so fields this model does not
        map (reminders, colors, conference data...) survive an update. Pass
        ``include_api_object=False`` for inserts, where the identity fields
        of the source resource (id, etag, iCalUID...) must not be sent.
        """
        base = self.api_object if include_api_object else None
        body = copy.deepcopy(base) if base else {}

        body["summary"] = self.title
        body["description"] = self.description
        body["location"] = self.location
        body["start"] = self._date_time_body(self.start)
        body["end"] = self._date_time_body(self.end)

        if self.rrule:
            body["recurrence"] = [self.rrule]

        if self.attendees or base:
            body["attendees"] = [attendee.to_api_body() for attendee in self.attendees]

        return body

    def _date_time_body(self, value: str | None) -> dict[str, Any]:
        """Build an EventDateTime resource."""
        body: dict[str, Any] = {"date" if self.all_day else "dateTime": value}
        if self.time_zone:
            body["timeZone"] = self.time_zone
        return body
