"""Command-line interface for calendar helper."""

import argparse
import logging
import sys

from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from calendar_helper.config import get_settings
from calendar_helper.dates import DateParseError, str_to_rfc2445, str_to_rfc3339
from calendar_helper.drivers import CalendarError, GoogleCalendarDriver
from calendar_helper.models.event import Event

logger = logging.getLogger(__name__)


def format_event(event: Event) -> str:
    """Render an event as one tab-separated line."""
    marker = "*" if event.is_recurrence else ""
    return "\t".join(
        [
            f"{event.id}{marker}",
            event.start or "",
            event.end or "",
            event.title or "(No title)",
        ]
    )


def _parse_timestamp(value: str) -> int | str:
    """Treat integer arguments as Unix timestamps."""
    try:
        return int(value)
    except ValueError:
        return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="calendar-helper",
        description="Calendar Helper - Read and manage Google Calendar events",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )
    parser.add_argument(
        "--calendar",
        help="Calendar ID (default: CALENDAR_DEFAULT_CALENDAR_ID)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: CALENDAR_LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    get_parser = subparsers.add_parser("get", help="Show a single event")
    get_parser.add_argument("event_id", help="Event ID")

    list_parser = subparsers.add_parser("list", help="List events on the calendar")
    list_parser.add_argument("--start", help="Only events ending after this date")
    list_parser.add_argument("--end", help="Only events starting before this date")
    list_parser.add_argument(
        "--max-results",
        type=int,
        default=250,
        help="Events per page",
    )

    instances_parser = subparsers.add_parser(
        "instances", help="List the instances of a recurring event"
    )
    instances_parser.add_argument("event_id", help="Recurring event ID")

    delete_parser = subparsers.add_parser("delete", help="Delete an event")
    delete_parser.add_argument("event_id", help="Event ID")

    rfc3339_parser = subparsers.add_parser(
        "rfc3339", help="Convert a date or Unix timestamp to an event date"
    )
    rfc3339_parser.add_argument("value", help="Date string or Unix timestamp")
    rfc3339_parser.add_argument(
        "--all-day",
        action="store_true",
        help="Format as an all-day date (YYYY-MM-DD)",
    )
    rfc3339_parser.add_argument(
        "--end",
        action="store_true",
        help="Value is the end of an all-day event (adds one day)",
    )

    rfc2445_parser = subparsers.add_parser(
        "rfc2445", help="Convert a date or Unix timestamp to a recurrence rule date"
    )
    rfc2445_parser.add_argument("value", help="Date string or Unix timestamp")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = get_settings()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    time_zone = settings.default_time_zone

    try:
        if args.command == "rfc3339":
            print(
                str_to_rfc3339(
                    _parse_timestamp(args.value),
                    all_day=args.all_day,
                    is_end=args.end,
                    time_zone=time_zone,
                )
            )
            return 0

        if args.command == "rfc2445":
            print(str_to_rfc2445(_parse_timestamp(args.value), time_zone=time_zone))
            return 0

        driver = GoogleCalendarDriver(settings)
        driver.set_calendar_id(args.calendar)

        if args.command == "get":
            event = driver.event(args.event_id)
            if event is None:
                print(f"Event {args.event_id} not found", file=sys.stderr)
                return 1
            print(format_event(event))

        elif args.command == "list":
            params = {"maxResults": args.max_results}
            if args.start:
                params["timeMin"] = str_to_rfc3339(
                    _parse_timestamp(args.start), time_zone=time_zone
                )
            if args.end:
                params["timeMax"] = str_to_rfc3339(
                    _parse_timestamp(args.end), time_zone=time_zone
                )
            for event in driver.events(**params):
                print(format_event(event))

        elif args.command == "instances":
            for event in driver.recurrences(args.event_id):
                print(format_event(event))

        elif args.command == "delete":
            if not driver.delete_event(args.event_id):
                print(f"Event {args.event_id} not found", file=sys.stderr)
                return 1
            print(f"Deleted {args.event_id}")

    except DateParseError as e:
        print(f"Invalid date: {e}", file=sys.stderr)
        return 2
    except CalendarError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except GoogleAuthError as e:
        logger.debug("Google authentication failed", exc_info=True)
        print(f"Authentication error: {e}", file=sys.stderr)
        return 1
    except HttpError as e:
        logger.debug("Google API request failed", exc_info=True)
        print(f"Google API error {e.resp.status}: {e.reason}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
