"""Pytest fixtures for calendar helper tests.

This module provides test fixtures that ensure:
1. No external API calls are made (Google APIs, OAuth token endpoint)
2. No real credentials are loaded in unit tests
3. Isolated test environment with controlled configuration
"""

import os
from typing import Any, Callable

import httplib2
import pytest
from googleapiclient.errors import HttpError

# Set test environment BEFORE importing application modules
os.environ.setdefault("CALENDAR_DEFAULT_CALENDAR_ID", "test-calendar-id")
os.environ.setdefault("CALENDAR_DEFAULT_TIME_ZONE", "UTC")

from calendar_helper.config import Settings
from calendar_helper.drivers.google import GoogleCalendarDriver


# =============================================================================
# Fake Google Calendar service
# =============================================================================


def make_http_error(status: int, message: str = "error") -> HttpError:
    """Build a real HttpError as raised by googleapiclient."""
    resp = httplib2.Response({"status": status})
    resp.reason = message
    content = f'{{"error": {{"code": {status}, "message": "{message}"}}}}'
    return HttpError(resp, content.encode())


class FakeRequest:
    """Stand-in for googleapiclient.http.HttpRequest."""

    def __init__(self, method: str, params: dict[str, Any], outcome: Any):
        self.method = method
        self.params = params
        self.outcome = outcome
        self.executions = 0

    def execute(self, num_retries: int = 0) -> Any:
        self.executions += 1
        if isinstance(self.outcome, Exception):
            raise self.outcome
        if callable(self.outcome):
            return self.outcome(self.params)
        return self.outcome


class FakeBatch:
    """Stand-in for googleapiclient.http.BatchHttpRequest."""

    def __init__(self, callback):
        self.callback = callback
        self.requests: list[tuple[str, FakeRequest]] = []
        self.executed = False

    def add(self, request: FakeRequest, callback=None, request_id: str | None = None):
        self.requests.append((request_id, request))

    def execute(self, http=None):
        self.executed = True
        for request_id, request in self.requests:
            try:
                response = request.execute()
            except HttpError as e:
                self.callback(request_id, None, e)
            else:
                self.callback(request_id, response, None)


class FakeEventsResource:
    """Stand-in for the `events()` collection.

    Outcomes are registered per (method, key) in `outcomes`, where key is
    the event ID for get/delete/update, the page token for list and
    (event ID, page token) for instances. An outcome may be a response
    dict, an exception to raise or a callable receiving the call params.
    """

    def __init__(self):
        self.outcomes: dict[tuple[str, Any], Any] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _request(self, method: str, key: Any, params: dict[str, Any]) -> FakeRequest:
        self.calls.append((method, params))
        return FakeRequest(method, params, self.outcomes.get((method, key)))

    def get(self, **params):
        return self._request("get", params["eventId"], params)

    def list(self, **params):
        return self._request("list", params.get("pageToken"), params)

    def instances(self, **params):
        return self._request(
            "instances", (params["eventId"], params.get("pageToken")), params
        )

    def insert(self, **params):
        return self._request("insert", None, params)

    def update(self, **params):
        return self._request("update", params["eventId"], params)

    def delete(self, **params):
        return self._request("delete", params["eventId"], params)


class FakeCalendarService:
    """Stand-in for the object returned by `build("calendar", "v3")`."""

    def __init__(self):
        self.events_resource = FakeEventsResource()
        self.batches: list[FakeBatch] = []

    def events(self) -> FakeEventsResource:
        return self.events_resource

    def new_batch_http_request(self, callback=None) -> FakeBatch:
        batch = FakeBatch(callback)
        self.batches.append(batch)
        return batch


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from calendar_helper.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def http_error():
    """Factory for Google API HTTP errors."""
    return make_http_error


@pytest.fixture
def settings() -> Settings:
    """Settings with a small batch size and no credentials."""
    return Settings(
        default_calendar_id="test-calendar-id",
        batch_size=3,
        num_retries=0,
    )


@pytest.fixture
def fake_service() -> FakeCalendarService:
    """Fake Calendar service; no network access."""
    service = FakeCalendarService()
    service.events_resource.outcomes[("insert", None)] = lambda params: {
        **params["body"],
        "id": "created-event-id",
    }
    return service


@pytest.fixture
def driver(settings: Settings, fake_service: FakeCalendarService) -> GoogleCalendarDriver:
    """Google driver wired to the fake service."""
    return GoogleCalendarDriver(settings, service=fake_service)


# =============================================================================
# Sample API resources
# =============================================================================


@pytest.fixture
def timed_event_data() -> dict[str, Any]:
    """Google event resource for a timed event with attendees."""
    return {
        "kind": "calendar#event",
        "id": "evt-timed",
        "etag": '"3181161784712000"',
        "status": "confirmed",
        "summary": "Planning meeting",
        "description": "Quarterly planning",
        "location": "Room 4",
        "colorId": "5",
        "start": {
            "dateTime": "2024-06-15T09:00:00-04:00",
            "timeZone": "America/New_York",
        },
        "end": {
            "dateTime": "2024-06-15T10:00:00-04:00",
            "timeZone": "America/New_York",
        },
        "attendees": [
            {
                "id": "att-1",
                "email": "alice@example.com",
                "displayName": "Alice",
                "responseStatus": "accepted",
                "comment": "See you there",
            },
            {
                "email": "bob@example.com",
                "responseStatus": "needsAction",
                "optional": True,
            },
        ],
        "reminders": {"useDefault": True},
    }


@pytest.fixture
def all_day_event_data() -> dict[str, Any]:
    """Google event resource for a weekly all-day recurring event."""
    return {
        "kind": "calendar#event",
        "id": "evt-allday",
        "status": "confirmed",
        "summary": "Offsite",
        "start": {"date": "2024-01-01"},
        "end": {"date": "2024-01-04"},
        "recurrence": ["RRULE:FREQ=WEEKLY;COUNT=3"],
    }


@pytest.fixture
def instance_data() -> Callable[[str, int], dict[str, Any]]:
    """Factory for instances of a recurring event."""

    def make(parent_id: str, day: int) -> dict[str, Any]:
        return {
            "kind": "calendar#event",
            "id": f"{parent_id}_202401{day:02d}",
            "recurringEventId": parent_id,
            "status": "confirmed",
            "summary": "Standup",
            "start": {"dateTime": f"2024-01-{day:02d}T09:00:00Z"},
            "end": {"dateTime": f"2024-01-{day:02d}T09:15:00Z"},
        }

    return make
