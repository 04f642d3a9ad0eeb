"""Opening hours and bookable time slots.

The weekly schedule maps each day of week to the service windows open
that day. A day with no windows is closed. Each window yields slots from
its start to its end inclusive, every ``slot_interval_minutes``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as dt_date, datetime, timedelta
from typing import Any

from table_engine.core.timeparse import format_minutes, parse_date, parse_time
from table_engine.models import DayOfWeek, RestaurantConfig, ServiceWindow


@dataclass
class SlotGroup:
    """Slots offered by one service window."""

    window_id: str
    name: str
    slots: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"window_id": self.window_id, "name": self.name, "slots": self.slots}


@dataclass
class ResolvedSchedule:
    """Bookable slots for one date."""

    date: str
    day: DayOfWeek
    groups: list[SlotGroup] = field(default_factory=list)

    @property
    def is_closed(self) -> bool:
        return not self.groups

    @property
    def slots(self) -> list[str]:
        """All slot times, in window order, without duplicates.

        Overlapping windows can offer the same time twice; it is listed once.
        """
        seen: dict[str, None] = {}
        for group in self.groups:
            for slot in group.slots:
                seen.setdefault(slot)
        return list(seen)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "date": self.date,
            "day": self.day.value,
            "closed": self.is_closed,
            "groups": [g.to_dict() for g in self.groups],
        }


def window_slots(window: ServiceWindow) -> list[str]:
    """Slot times for a service window, start and end inclusive."""
    return [
        format_minutes(minute)
        for minute in range(
            window.start_minutes, window.end_minutes + 1, window.slot_interval_minutes
        )
    ]


def resolve_slots(day: str | dt_date | datetime, config: RestaurantConfig) -> ResolvedSchedule:
    """
    Resolve the bookable slots for a date.

    The day of week comes from the UTC civil date, so the result does not
    depend on the caller's timezone.

    Args:
        day: Date to resolve (YYYY-MM-DD, date, or datetime)
        config: Restaurant configuration

    Returns:
        Slots grouped per service window; no groups when closed
    """
    civil = parse_date(day)
    weekday = DayOfWeek.from_date(civil)
    windows = sorted(config.windows_for(weekday), key=lambda w: w.start_minutes)

    return ResolvedSchedule(
        date=civil.isoformat(),
        day=weekday,
        groups=[
            SlotGroup(window_id=w.id, name=w.name, slots=window_slots(w))
            for w in windows
        ],
    )


def is_closed(day: str | dt_date | datetime, config: RestaurantConfig) -> bool:
    """Whether the restaurant has no service windows on a date."""
    weekday = DayOfWeek.from_date(parse_date(day))
    return not config.weekly_schedule.get(weekday)


def is_valid_slot(day: str | dt_date | datetime, time: str, config: RestaurantConfig) -> bool:
    """Whether a submitted time is one of the date's bookable slots."""
    parse_time(time)
    return time in resolve_slots(day, config).slots


def next_open_date(
    day: str | dt_date | datetime,
    config: RestaurantConfig,
    horizon_days: int = 14,
) -> str | None:
    """First date on or after ``day`` with at least one slot.

    Args:
        day: Date to start searching from
        config: Restaurant configuration
        horizon_days: Number of days to look at, including ``day``

    Returns:
        Date as YYYY-MM-DD, or None if closed throughout the horizon
    """
    start = parse_date(day)
    for offset in range(horizon_days):
        candidate = start + timedelta(days=offset)
        if resolve_slots(candidate, config).slots:
            return candidate.isoformat()
    return None
