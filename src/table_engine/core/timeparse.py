"""Date and clock-time parsing shared by every entry point.

Times are handled as minutes from midnight so interval arithmetic stays
integer-only. Bookings never wrap past midnight: a 22:30 booking lasting
150 minutes ends at minute 1500 of the same date.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone

from table_engine.core.exceptions import DateParseError, TimeParseError

_HHMM = re.compile(r"(\d{2}):(\d{2})")


def parse_date(value: str | date | datetime) -> date:
    """Parse a calendar date.

    Strings must be ISO ``YYYY-MM-DD``. Aware datetimes are converted to
    UTC before taking the civil date so the result does not depend on the
    caller's timezone; naive datetimes are taken as UTC.

    Raises:
        DateParseError: If the value is not a valid date.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise DateParseError(
            "Date must be a YYYY-MM-DD string",
            details={"value": repr(value)},
        )
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise DateParseError(
            f"Invalid date: {value!r}",
            details={"value": value},
            cause=e,
        ) from e


def parse_time(value: str) -> int:
    """Parse zero-padded ``HH:MM`` into minutes from midnight.

    Raises:
        TimeParseError: If the value is not a valid clock time.
    """
    match = _HHMM.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise TimeParseError(
            f"Invalid time: {value!r} (expected HH:MM)",
            details={"value": repr(value)},
        )

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise TimeParseError(
            f"Invalid time: {value!r} (out of range)",
            details={"value": value},
        )
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Format minutes from midnight as zero-padded ``HH:MM``."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
