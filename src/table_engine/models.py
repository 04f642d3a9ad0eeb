"""Domain models for tables, rules, opening hours and bookings.

Configuration objects are frozen pydantic models so invalid settings are
rejected when they are loaded, never halfway through an allocation.
Bookings are plain frozen dataclasses: they arrive from the persistence
collaborator as a snapshot and the engine only ever reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date as dt_date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from table_engine.core.exceptions import (
    BookingStateError,
    PartySizeError,
    TimeParseError,
)
from table_engine.core.timeparse import parse_date, parse_time


class OperatingMode(str, Enum):
    """Availability model used by a restaurant."""

    SIMPLE = "simple"  # Seats per exact slot
    ADVANCED = "advanced"  # Per-table, overlap-aware


class DayOfWeek(str, Enum):
    """Day of week key used by the weekly schedule."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, day: dt_date) -> DayOfWeek:
        """Day of week for a civil date (Monday is weekday 0)."""
        return list(cls)[day.weekday()]


class BookingStatus(str, Enum):
    """Status of a booking."""

    PENDING = "pending"  # Awaiting staff decision
    CONFIRMED = "confirmed"
    DECLINED = "declined"


# Pending -> {Confirmed, Declined}; both terminal
BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.DECLINED}),
    BookingStatus.CONFIRMED: frozenset(),
    BookingStatus.DECLINED: frozenset(),
}


class _ConfigModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Table(_ConfigModel):
    """A physical restaurant table."""

    id: str = Field(min_length=1)
    name: str
    capacity: int = Field(gt=0)
    is_combinable: bool = True


class CombinationRule(_ConfigModel):
    """Joins ``count`` tables of ``table_capacity`` seats into one of ``new_capacity``."""

    id: str | None = None
    count: int = Field(ge=2)
    table_capacity: int = Field(gt=0)
    new_capacity: int = Field(gt=0)


class DurationRule(_ConfigModel):
    """Maps an inclusive party-size range to an occupancy duration."""

    id: str | None = None
    min_guests: int = Field(ge=1)
    max_guests: int = Field(ge=1)
    duration_minutes: int = Field(gt=0)

    @model_validator(mode="after")
    def check_range(self) -> DurationRule:
        if self.max_guests < self.min_guests:
            raise ValueError(
                f"max_guests ({self.max_guests}) must not be below "
                f"min_guests ({self.min_guests})"
            )
        return self

    def matches(self, party_size: int) -> bool:
        """Whether the party size falls inside this rule's range."""
        return self.min_guests <= party_size <= self.max_guests


class ServiceWindow(_ConfigModel):
    """A named opening period (lunch, dinner) with its slot granularity."""

    id: str = Field(min_length=1)
    name: str
    start_time: str
    end_time: str
    slot_interval_minutes: int = Field(ge=1)

    @field_validator("start_time", "end_time")
    @classmethod
    def check_clock_time(cls, value: str) -> str:
        try:
            parse_time(value)
        except TimeParseError as e:
            raise ValueError(e.message) from e
        return value

    @model_validator(mode="after")
    def check_order(self) -> ServiceWindow:
        if self.start_minutes > self.end_minutes:
            raise ValueError(
                f"Service window {self.id!r} starts ({self.start_time}) "
                f"after it ends ({self.end_time})"
            )
        return self

    @property
    def start_minutes(self) -> int:
        return parse_time(self.start_time)

    @property
    def end_minutes(self) -> int:
        return parse_time(self.end_time)


def _default_tables() -> tuple[Table, ...]:
    return tuple(
        Table(id=f"t4-{i}", name=f"Tavolo {i}", capacity=4, is_combinable=True)
        for i in range(1, 11)
    )


def _default_combination_rules() -> tuple[CombinationRule, ...]:
    return (
        CombinationRule(id="rule-1", count=2, table_capacity=4, new_capacity=6),
        CombinationRule(id="rule-2", count=3, table_capacity=4, new_capacity=8),
    )


def _default_duration_rules() -> tuple[DurationRule, ...]:
    return (
        DurationRule(id="dur-1", min_guests=1, max_guests=2, duration_minutes=90),
        DurationRule(id="dur-2", min_guests=3, max_guests=4, duration_minutes=120),
        DurationRule(id="dur-3", min_guests=5, max_guests=100, duration_minutes=150),
    )


def _default_service_windows() -> tuple[ServiceWindow, ...]:
    return (
        ServiceWindow(
            id="sw-lunch", name="Pranzo",
            start_time="12:00", end_time="14:30", slot_interval_minutes=30,
        ),
        ServiceWindow(
            id="sw-dinner", name="Cena",
            start_time="19:00", end_time="22:00", slot_interval_minutes=30,
        ),
    )


def _default_weekly_schedule() -> dict[DayOfWeek, tuple[str, ...]]:
    both = ("sw-lunch", "sw-dinner")
    return {
        DayOfWeek.MONDAY: (),  # Closed
        DayOfWeek.TUESDAY: ("sw-dinner",),
        DayOfWeek.WEDNESDAY: both,
        DayOfWeek.THURSDAY: both,
        DayOfWeek.FRIDAY: both,
        DayOfWeek.SATURDAY: both,
        DayOfWeek.SUNDAY: both,
    }


class RestaurantConfig(_ConfigModel):
    """Everything the engine needs to know about one restaurant.

    Passed explicitly into every call; the engine keeps no module-level
    configuration of its own.
    """

    name: str = "The Golden Spoon"
    mode: OperatingMode = OperatingMode.ADVANCED

    # Advanced mode
    tables: tuple[Table, ...] = Field(default_factory=_default_tables)
    combination_rules: tuple[CombinationRule, ...] = Field(
        default_factory=_default_combination_rules
    )
    duration_rules: tuple[DurationRule, ...] = Field(
        default_factory=_default_duration_rules
    )

    # Opening hours (both modes)
    service_windows: tuple[ServiceWindow, ...] = Field(
        default_factory=_default_service_windows
    )
    weekly_schedule: dict[DayOfWeek, tuple[str, ...]] = Field(
        default_factory=_default_weekly_schedule
    )

    # Simple mode
    max_guests_per_slot: int = Field(default=30, ge=0)

    @field_validator("weekly_schedule", mode="before")
    @classmethod
    def normalize_days(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                (k.lower() if isinstance(k, str) else k): (v if v is not None else ())
                for k, v in value.items()
            }
        return value

    @model_validator(mode="after")
    def check_references(self) -> RestaurantConfig:
        table_ids = [t.id for t in self.tables]
        duplicates = sorted({tid for tid in table_ids if table_ids.count(tid) > 1})
        if duplicates:
            raise ValueError(f"Duplicate table ids: {', '.join(duplicates)}")

        window_ids = [w.id for w in self.service_windows]
        duplicates = sorted({wid for wid in window_ids if window_ids.count(wid) > 1})
        if duplicates:
            raise ValueError(f"Duplicate service window ids: {', '.join(duplicates)}")

        known = set(window_ids)
        for day, ids in self.weekly_schedule.items():
            unknown = [wid for wid in ids if wid not in known]
            if unknown:
                raise ValueError(
                    f"Weekly schedule for {day.value} references unknown "
                    f"service windows: {', '.join(unknown)}"
                )
        return self

    def windows_for(self, day: DayOfWeek) -> list[ServiceWindow]:
        """Service windows active on a day, in schedule order."""
        by_id = {w.id: w for w in self.service_windows}
        return [by_id[wid] for wid in self.weekly_schedule.get(day, ())]


@dataclass(frozen=True)
class Booking:
    """A reservation record supplied by the persistence collaborator."""

    id: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    adults: int
    children: int = 0
    status: BookingStatus = BookingStatus.PENDING
    assigned_table_ids: tuple[str, ...] | None = None
    name: str | None = None
    contact: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", parse_date(self.date).isoformat())
        parse_time(self.time)
        object.__setattr__(self, "status", BookingStatus(self.status))
        if self.adults < 0 or self.children < 0:
            raise PartySizeError(
                "Guest counts must not be negative",
                details={"booking_id": self.id, "adults": self.adults, "children": self.children},
            )
        if isinstance(self.assigned_table_ids, str):
            raise TypeError(
                f"Booking {self.id}: assigned_table_ids must be a sequence of ids, "
                f"not the string {self.assigned_table_ids!r}"
            )
        if self.assigned_table_ids is not None:
            object.__setattr__(self, "assigned_table_ids", tuple(self.assigned_table_ids))

    @property
    def party_size(self) -> int:
        """Total guests (adults + children)."""
        return self.adults + self.children

    @property
    def start_minutes(self) -> int:
        return parse_time(self.time)

    def transition_to(self, status: BookingStatus) -> Booking:
        """Return a copy of this booking in a new status.

        Raises:
            BookingStateError: If the transition is not allowed.
        """
        status = BookingStatus(status)
        if status not in BOOKING_TRANSITIONS[self.status]:
            raise BookingStateError(
                f"Cannot move booking {self.id} from {self.status.value} to {status.value}",
                details={"booking_id": self.id, "from": self.status.value, "to": status.value},
            )
        return replace(self, status=status)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "date": self.date,
            "time": self.time,
            "adults": self.adults,
            "children": self.children,
            "status": self.status.value,
            "assigned_table_ids": (
                list(self.assigned_table_ids) if self.assigned_table_ids is not None else None
            ),
            "name": self.name,
            "contact": self.contact,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Booking:
        """Build a booking from a stored record."""
        return cls(
            id=str(data["id"]),
            date=data["date"],
            time=data["time"],
            adults=int(data.get("adults", 0)),
            children=int(data.get("children", 0)),
            status=BookingStatus(str(data.get("status", "pending")).lower()),
            assigned_table_ids=data.get("assigned_table_ids"),
            name=data.get("name"),
            contact=data.get("contact"),
        )
