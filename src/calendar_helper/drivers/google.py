"""Google Calendar API driver.

Provides the calendar driver operations on top of Google Calendar:
- Get, list, create, update and delete events
- List the instances of a recurring event
- Fetch many events (and their instances) in one batch request

## API Documentation

https://developers.google.com/calendar/api/v3/reference

## Authentication

Uses a service account key file. With domain-wide delegation configured,
the driver acts on behalf of `Settings.delegated_user`.

## Batch Requests

https://developers.google.com/calendar/api/guides/batch

A batch may hold at most 1,000 calls; Google recommends keeping batches
small, so `specific_events()` splits its calls into batches of
`Settings.batch_size`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any, Callable

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from calendar_helper.config import Settings, get_settings
from calendar_helper.drivers.base import (
    CalendarDriver,
    CalendarError,
    ConfigurationError,
)
from calendar_helper.models.event import Event

logger = logging.getLogger(__name__)

# 410 Gone is returned for events that were deleted
NOT_FOUND_STATUSES = (404, 410)

EVENTS_KIND = "calendar#events"


def is_not_found(error: HttpError) -> bool:
    """Check if a Google API error means the resource does not exist."""
    return error.resp.status in NOT_FOUND_STATUSES


class GoogleCalendarDriver(CalendarDriver):
    """Calendar driver for the Google Calendar API.

    Example:
        ```python
        driver = GoogleCalendarDriver(get_settings())

        # Read an event
        event = driver.event("abc123")

        # Fetch several events and their instances in one round trip
        events = driver.specific_events(["abc123", "def456"], with_recurrences=True)

        # Create an event on another calendar
        driver.set_calendar_id("team@group.calendar.google.com").create_event(event)
        ```
    """

    name = "google"

    def __init__(
        self,
        settings: Settings | None = None,
        service: Any | None = None,
    ):
        """Initialize the driver.

        Args:
            settings: Application settings (defaults to the cached settings)
            service: Pre-built Calendar API service, skips credential loading
        """
        self.settings = settings or get_settings()
        super().__init__(self.settings.default_calendar_id)
        self._service = service if service is not None else self._build_service()

    def _build_service(self) -> Any:
        """Build the Calendar API service from service account credentials."""
        if not self.settings.service_account_configured:
            raise ConfigurationError(
                "No service account key file configured "
                "(set CALENDAR_SERVICE_ACCOUNT_KEY_FILE)",
                driver=self.name,
            )

        key_file = self.settings.service_account_key_file
        if not key_file.is_file():
            raise ConfigurationError(
                f"Service account key file not found: {key_file}",
                driver=self.name,
            )

        try:
            credentials = service_account.Credentials.from_service_account_file(
                str(key_file),
                scopes=self.settings.scopes,
            )
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid service account key file {key_file}: {e}",
                driver=self.name,
            ) from e
        if self.settings.delegated_user:
            credentials = credentials.with_subject(self.settings.delegated_user)

        return build("calendar", "v3", credentials=credentials, cache_discovery=False)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((TimeoutError, ConnectionError)),
        reraise=True,
    )
    def _execute(self, request: Any) -> Any:
        """Execute a single API request, retrying transport failures."""
        return request.execute(num_retries=self.settings.num_retries)

    def _paginate(self, method: Callable[..., Any], **params: Any) -> Iterator[dict[str, Any]]:
        """Yield the items of every page of a list-style request."""
        page_token = None

        while True:
            if page_token:
                params["pageToken"] = page_token

            result = self._execute(method(**params))

            yield from result.get("items", [])

            page_token = result.get("nextPageToken")
            if not page_token:
                break

    def _to_event(self, data: dict[str, Any]) -> Event:
        return Event.from_api(data, self.calendar_id)

    def event(self, event_id: str) -> Event | None:
        """Get a single event by ID.

        Args:
            event_id: Event ID

        Returns:
            Event or None if not found
        """
        try:
            result = self._execute(
                self._service.events().get(calendarId=self.calendar_id, eventId=event_id)
            )
        except HttpError as e:
            if is_not_found(e):
                logger.info(f"Event {event_id} not found in calendar {self.calendar_id}")
                return None
            raise

        return self._to_event(result)

    def events(self, **params: Any) -> list[Event]:
        """List events on the current calendar.

        Args:
            **params: Parameters for `events.list`, e.g. timeMin, timeMax,
                singleEvents, q

        Returns:
            List of Event objects across all pages
        """
        return [
            self._to_event(item)
            for item in self._paginate(
                self._service.events().list, calendarId=self.calendar_id, **params
            )
        ]

    def recurrences(self, event_id: str, **params: Any) -> list[Event]:
        """List the instances of a recurring event.

        Args:
            event_id: ID of the recurring event
            **params: Parameters for `events.instances`, e.g. timeMin, timeMax

        Returns:
            List of Event objects, one per instance
        """
        return [
            self._to_event(item)
            for item in self._paginate(
                self._service.events().instances,
                calendarId=self.calendar_id,
                eventId=event_id,
                **params,
            )
        ]

    def specific_events(
        self,
        event_ids: Iterable[str],
        with_recurrences: bool = False,
        **recurrence_params: Any,
    ) -> list[Event]:
        """Get several events using batch requests.

        When recurrences are requested, each event is followed by its
        instances. The first instance is left out since it is the event
        itself. Only the first page of instances is fetched; pass
        `maxResults` to widen it.

        Args:
            event_ids: IDs of the events to fetch
            with_recurrences: Also fetch the instances of each event
            **recurrence_params: Parameters for `events.instances`

        Returns:
            Events in request order; events that do not exist are left out

        Raises:
            HttpError: The first failed call that is not a not-found error
        """
        calls: list[tuple[str, Any]] = []
        events_resource = self._service.events()

        for index, event_id in enumerate(event_ids):
            calls.append(
                (
                    f"event-{index}",
                    events_resource.get(calendarId=self.calendar_id, eventId=event_id),
                )
            )
            if with_recurrences:
                calls.append(
                    (
                        f"instances-{index}",
                        events_resource.instances(
                            calendarId=self.calendar_id,
                            eventId=event_id,
                            **recurrence_params,
                        ),
                    )
                )

        if not calls:
            return []

        responses: dict[str, Any] = {}
        errors: dict[str, Exception] = {}

        def collect(request_id: str, response: Any, exception: Exception | None) -> None:
            if exception is not None:
                errors[request_id] = exception
            else:
                responses[request_id] = response

        batch_size = self.settings.batch_size
        for offset in range(0, len(calls), batch_size):
            chunk = calls[offset:offset + batch_size]
            batch = self._service.new_batch_http_request(callback=collect)
            for request_id, request in chunk:
                batch.add(request, request_id=request_id)

            logger.debug(
                f"Executing batch of {len(chunk)} requests "
                f"on calendar {self.calendar_id}"
            )
            batch.execute()

        for request_id, _ in calls:
            error = errors.get(request_id)
            if error is None:
                continue
            if isinstance(error, HttpError) and is_not_found(error):
                logger.info(f"Batch request {request_id} returned not found, skipping")
                continue
            raise error

        events: list[Event] = []
        for request_id, _ in calls:
            if request_id in responses:
                events.extend(self._events_from_batch_response(responses[request_id]))

        return events

    def _events_from_batch_response(self, response: dict[str, Any]) -> list[Event]:
        """Convert a batch response into events.

        An instances response is a list resource whose first item is the
        recurring event itself, which has its own get response.
        """
        if response.get("kind") == EVENTS_KIND:
            return [self._to_event(item) for item in response.get("items", [])[1:]]
        return [self._to_event(response)]

    def create_event(self, event: Event) -> Event:
        """Create a new event.

        Switches to `event.calendar_id` first when it is set. Only the mapped
        fields are sent, so an event read from one calendar can be copied
        to another without carrying over its ID.

        Args:
            event: Event to create

        Returns:
            The created Event
        """
        self.set_calendar_id(event.calendar_id)

        result = self._execute(
            self._service.events().insert(
                calendarId=self.calendar_id,
                body=event.to_api_body(include_api_object=False),
            )
        )

        logger.info(f"Created event {result.get('id')} in calendar {self.calendar_id}")
        return self._to_event(result)

    def update_event(self, event: Event) -> Event:
        """Update an existing event.

        The event is written back from its provider resource, so fields the
        model does not map are kept.

        Args:
            event: Event to update, usually obtained from `event()`

        Returns:
            The updated Event

        Raises:
            CalendarError: If the event has no ID
        """
        self.set_calendar_id(event.calendar_id)

        event_id = (event.api_object or {}).get("id") or event.id
        if not event_id:
            raise CalendarError("Cannot update an event without an ID", driver=self.name)

        result = self._execute(
            self._service.events().update(
                calendarId=self.calendar_id,
                eventId=event_id,
                body=event.to_api_body(),
            )
        )

        return self._to_event(result)

    def delete_event(self, event_id: str) -> bool:
        """Remove an event.

        Args:
            event_id: Event ID

        Returns:
            True if deleted, False if the event does not exist
        """
        try:
            self._execute(
                self._service.events().delete(calendarId=self.calendar_id, eventId=event_id)
            )
        except HttpError as e:
            if is_not_found(e):
                logger.info(f"Event {event_id} not found in calendar {self.calendar_id}")
                return False
            raise

        logger.info(f"Deleted event {event_id} from calendar {self.calendar_id}")
        return True
