#!/usr/bin/env python3
"""CLI tools for checking restaurant availability.

Usage:
    table-engine slots 2025-03-14                         # Bookable slots for a date
    table-engine check --party 4 --date 2025-03-14 --time 19:30
    table-engine check --party 6 --date 2025-03-14 --time 20:00 --bookings bookings.json

Exit codes for ``check``: 0 available, 1 not available, 2 invalid input
or configuration.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from table_engine.core.exceptions import (
    ConfigurationError,
    TableEngineError,
    wrap_exception,
)
from table_engine.log import get_logger, setup_logging
from table_engine.models import Booking

log = get_logger(__name__)

EXIT_AVAILABLE = 0
EXIT_UNAVAILABLE = 1
EXIT_ERROR = 2


def load_bookings(path: str | None) -> list[Booking]:
    """Load a booking snapshot from a JSON file (a list of booking records)."""
    if not path:
        return []

    try:
        records = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise wrap_exception(
            e, ConfigurationError, f"Cannot read bookings file {path}", path=path
        ) from e

    if not isinstance(records, list):
        raise ConfigurationError(
            "Bookings file must contain a JSON list",
            details={"path": path},
        )
    try:
        return [Booking.from_dict(record) for record in records]
    except (KeyError, TypeError, ValueError) as e:
        raise wrap_exception(
            e, ConfigurationError, f"Malformed booking record in {path}", path=path
        ) from e


def show_slots(args: argparse.Namespace) -> int:
    """Print the bookable slots for a date."""
    from table_engine.config import get_settings
    from table_engine.services import AvailabilityService

    service = AvailabilityService.from_settings(get_settings(args.config_dir))
    schedule = service.resolve_slots(args.date)

    if args.json:
        print(json.dumps(schedule.to_dict(), indent=2))
        return 0

    print(f"\n=== {schedule.date} ({schedule.day.value}) ===\n")
    if schedule.is_closed:
        print("Closed.")
        next_open = service.next_open_date(args.date)
        if next_open:
            print(f"Next open date: {next_open}")
        return 0

    for group in schedule.groups:
        print(f"{group.name}:")
        print(f"  {', '.join(group.slots)}")
    return 0


def check_availability(args: argparse.Namespace) -> int:
    """Decide a single reservation request."""
    from table_engine.config import get_settings
    from table_engine.services import AvailabilityService, BookingRequest

    settings = get_settings(args.config_dir)
    service = AvailabilityService.from_settings(settings)
    bookings = load_bookings(args.bookings)

    request = BookingRequest(
        date=args.date,
        time=args.time,
        adults=args.party,
        children=args.children,
    )
    decision = service.evaluate(request, bookings)

    if args.json:
        print(json.dumps(decision.to_dict(), indent=2))
    elif decision.available:
        if decision.table_ids:
            print(f"Available: tables {', '.join(decision.table_ids)} "
                  f"for {decision.duration_minutes} minutes")
        else:
            print("Available")
    else:
        print(f"Not available ({decision.reason.value}): {decision.message}")

    return EXIT_AVAILABLE if decision.available else EXIT_UNAVAILABLE


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Restaurant table availability tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config-dir", type=str, default="configs",
        help="Directory holding default.yaml and {env}.yaml (default: configs)",
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # slots
    slots_parser = subparsers.add_parser("slots", help="Show bookable slots for a date")
    slots_parser.add_argument("date", type=str, help="Date (YYYY-MM-DD)")

    # check
    check_parser = subparsers.add_parser("check", help="Check a reservation request")
    check_parser.add_argument("--party", type=int, required=True, help="Number of adults")
    check_parser.add_argument("--children", type=int, default=0, help="Number of children")
    check_parser.add_argument("--date", type=str, required=True, help="Date (YYYY-MM-DD)")
    check_parser.add_argument("--time", type=str, required=True, help="Time (HH:MM)")
    check_parser.add_argument(
        "--bookings", type=str, default=None,
        help="JSON file with the current bookings",
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    commands = {
        "slots": show_slots,
        "check": check_availability,
    }

    try:
        from table_engine.config import get_settings

        settings = get_settings(args.config_dir)
        setup_logging(
            level=settings.log_level,
            json_output=settings.log_json,
            restaurant=settings.restaurant.name,
        )
        return commands[args.command](args)
    except TableEngineError as e:
        log.error("Command failed", command=args.command, error=e.error_code)
        print(f"Error: {e.message}", file=sys.stderr)
        for detail in e.details.get("errors", []):
            print(f"  - {detail}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
