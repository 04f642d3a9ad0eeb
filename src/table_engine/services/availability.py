"""Availability service.

Decides whether a reservation request can be honored under the
restaurant's operating mode:

- Advanced: per-table allocation aware of overlapping durations
- Simple: guests per exact slot against a seat ceiling

Each mode is an ``AllocationStrategy``; the service picks one from
``STRATEGIES`` by ``OperatingMode``. A refusal is returned as a
``NoAvailability`` value, never raised.

Pending bookings do not hold capacity unless ``pending_holds_capacity``
is set. With the default, two concurrent requests can be offered the same
table and staff choose which hold to confirm; ``confirm_booking`` refuses
the second confirmation. The caller must still serialize "evaluate and
store" per date (see ``ReservationBook``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Union
from uuid import uuid4

from table_engine.core.exceptions import BookingConflictError, PartySizeError
from table_engine.core.timeparse import parse_date, parse_time
from table_engine.log import get_logger
from table_engine.models import Booking, BookingStatus, OperatingMode, RestaurantConfig
from table_engine.scheduling.allocator import allocate_tables
from table_engine.scheduling.capacity import check_capacity
from table_engine.scheduling.duration import resolve_duration
from table_engine.scheduling.overlap import booking_interval, occupied_tables
from table_engine.scheduling.schedule import (
    ResolvedSchedule,
    is_closed,
    next_open_date,
    resolve_slots,
)

if TYPE_CHECKING:
    from table_engine.config import Settings

log = get_logger(__name__)


class NoAvailabilityReason(str, Enum):
    """Why a request was refused."""

    NO_TABLE = "no_table"  # Advanced: no table or combination free
    SLOT_FULL = "slot_full"  # Simple: seat ceiling reached
    CLOSED = "closed"
    OUTSIDE_SERVICE_HOURS = "outside_service_hours"


REFUSAL_MESSAGES = {
    NoAvailabilityReason.NO_TABLE: (
        "No table or table combination is free for the requested date, time and duration."
    ),
    NoAvailabilityReason.SLOT_FULL: "The requested time slot is fully booked.",
    NoAvailabilityReason.CLOSED: "The restaurant is closed on the requested date.",
    NoAvailabilityReason.OUTSIDE_SERVICE_HOURS: (
        "The requested time is not one of the bookable slots for that date."
    ),
}


@dataclass(frozen=True)
class BookingRequest:
    """A guest's reservation request."""

    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    adults: int
    children: int = 0
    name: str | None = None
    contact: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", parse_date(self.date).isoformat())
        parse_time(self.time)
        _check_party_size(self.party_size)
        if self.adults < 0 or self.children < 0:
            raise PartySizeError(
                "Guest counts must not be negative",
                details={"adults": self.adults, "children": self.children},
            )

    @property
    def party_size(self) -> int:
        """Total guests (adults + children)."""
        return self.adults + self.children


@dataclass(frozen=True)
class Allocation:
    """A request that can be honored."""

    mode: OperatingMode
    date: str
    time: str
    party_size: int
    table_ids: tuple[str, ...] = ()
    duration_minutes: int | None = None

    @property
    def available(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "available": True,
            "mode": self.mode.value,
            "date": self.date,
            "time": self.time,
            "party_size": self.party_size,
            "table_ids": list(self.table_ids),
            "duration_minutes": self.duration_minutes,
        }


@dataclass(frozen=True)
class NoAvailability:
    """A request that cannot be honored, tagged with the mode that refused it."""

    mode: OperatingMode
    date: str
    time: str
    party_size: int
    reason: NoAvailabilityReason

    @property
    def available(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return REFUSAL_MESSAGES[self.reason]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "available": False,
            "mode": self.mode.value,
            "date": self.date,
            "time": self.time,
            "party_size": self.party_size,
            "reason": self.reason.value,
            "message": self.message,
        }


AvailabilityDecision = Union[Allocation, NoAvailability]


def _check_party_size(party_size: int) -> None:
    if isinstance(party_size, bool) or not isinstance(party_size, int) or party_size < 1:
        raise PartySizeError(
            f"Party size must be a positive integer, got {party_size!r}",
            details={"party_size": repr(party_size)},
        )


class AllocationStrategy(ABC):
    """Allocation decision contract shared by both operating modes."""

    mode: OperatingMode

    def __init__(self, config: RestaurantConfig, include_pending: bool = False) -> None:
        self.config = config
        self.include_pending = include_pending

    @abstractmethod
    def decide(
        self,
        party_size: int,
        date: str,
        time: str,
        bookings: Iterable[Booking],
    ) -> AvailabilityDecision:
        """Decide a request against a booking snapshot."""

    @abstractmethod
    def conflicts(self, booking: Booking, bookings: Iterable[Booking]) -> bool:
        """Whether confirming ``booking`` would overcommit confirmed capacity."""


class TableAllocationStrategy(AllocationStrategy):
    """Advanced mode: single best-fit table, then rule-based combinations."""

    mode = OperatingMode.ADVANCED

    def decide(
        self,
        party_size: int,
        date: str,
        time: str,
        bookings: Iterable[Booking],
    ) -> AvailabilityDecision:
        table_ids = allocate_tables(
            party_size,
            date,
            time,
            bookings,
            self.config.tables,
            self.config.combination_rules,
            self.config.duration_rules,
            include_pending=self.include_pending,
        )
        if table_ids is None:
            return NoAvailability(
                self.mode, date, time, party_size, NoAvailabilityReason.NO_TABLE
            )
        return Allocation(
            self.mode,
            date,
            time,
            party_size,
            table_ids=tuple(table_ids),
            duration_minutes=resolve_duration(party_size, self.config.duration_rules),
        )

    def conflicts(self, booking: Booking, bookings: Iterable[Booking]) -> bool:
        if not booking.assigned_table_ids:
            return False
        others = [b for b in bookings if b.id != booking.id]
        start, end = booking_interval(booking, self.config.duration_rules)
        taken = occupied_tables(
            booking.date, start, end, others, self.config.duration_rules
        )
        return bool(taken.intersection(booking.assigned_table_ids))


class SeatCapacityStrategy(AllocationStrategy):
    """Simple mode: guests per exact slot against ``max_guests_per_slot``."""

    mode = OperatingMode.SIMPLE

    def decide(
        self,
        party_size: int,
        date: str,
        time: str,
        bookings: Iterable[Booking],
    ) -> AvailabilityDecision:
        accepted = check_capacity(
            party_size,
            date,
            time,
            bookings,
            self.config.max_guests_per_slot,
            include_pending=self.include_pending,
        )
        if not accepted:
            return NoAvailability(
                self.mode, date, time, party_size, NoAvailabilityReason.SLOT_FULL
            )
        return Allocation(self.mode, date, time, party_size)

    def conflicts(self, booking: Booking, bookings: Iterable[Booking]) -> bool:
        others = [b for b in bookings if b.id != booking.id]
        return not check_capacity(
            booking.party_size,
            booking.date,
            booking.time,
            others,
            self.config.max_guests_per_slot,
        )


STRATEGIES: dict[OperatingMode, type[AllocationStrategy]] = {
    OperatingMode.ADVANCED: TableAllocationStrategy,
    OperatingMode.SIMPLE: SeatCapacityStrategy,
}


class AvailabilityService:
    """Entry point for availability decisions of one restaurant."""

    def __init__(
        self,
        config: RestaurantConfig,
        *,
        pending_holds_capacity: bool = False,
        enforce_service_hours: bool = True,
        next_open_horizon_days: int = 14,
    ) -> None:
        """Initialize availability service.

        Args:
            config: Restaurant configuration, treated as immutable
            pending_holds_capacity: Count Pending bookings as holding capacity
            enforce_service_hours: Refuse requests outside the resolved slots
            next_open_horizon_days: Days searched by ``next_open_date``
        """
        self.config = config
        self.pending_holds_capacity = pending_holds_capacity
        self.enforce_service_hours = enforce_service_hours
        self.next_open_horizon_days = next_open_horizon_days
        self._strategies = {
            mode: strategy_cls(config, include_pending=pending_holds_capacity)
            for mode, strategy_cls in STRATEGIES.items()
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> AvailabilityService:
        """Build a service from application settings."""
        return cls(
            settings.restaurant,
            pending_holds_capacity=settings.engine.pending_holds_capacity,
            enforce_service_hours=settings.engine.enforce_service_hours,
            next_open_horizon_days=settings.engine.next_open_horizon_days,
        )

    @property
    def mode(self) -> OperatingMode:
        return self.config.mode

    @property
    def strategy(self) -> AllocationStrategy:
        """Strategy for the active operating mode."""
        return self._strategies[self.config.mode]

    # ------------------------------------------------------------------
    # Opening hours
    # ------------------------------------------------------------------

    def resolve_slots(self, date: str) -> ResolvedSchedule:
        """Bookable slots for a date, grouped by service window."""
        return resolve_slots(date, self.config)

    def next_open_date(self, date: str) -> str | None:
        """First date on or after ``date`` with bookable slots."""
        return next_open_date(date, self.config, self.next_open_horizon_days)

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def allocate(
        self,
        party_size: int,
        date: str,
        time: str,
        bookings: Iterable[Booking],
    ) -> AvailabilityDecision:
        """Advanced-mode table allocation for a party."""
        _check_party_size(party_size)
        date = parse_date(date).isoformat()
        return self._strategies[OperatingMode.ADVANCED].decide(
            party_size, date, time, bookings
        )

    def check_capacity(
        self,
        party_size: int,
        date: str,
        time: str,
        bookings: Iterable[Booking],
    ) -> bool:
        """Simple-mode seat check for a party."""
        _check_party_size(party_size)
        date = parse_date(date).isoformat()
        decision = self._strategies[OperatingMode.SIMPLE].decide(
            party_size, date, time, bookings
        )
        return decision.available

    def evaluate(
        self,
        request: BookingRequest,
        bookings: Iterable[Booking],
    ) -> AvailabilityDecision:
        """
        Decide a request under the active operating mode.

        Args:
            request: Reservation request
            bookings: Snapshot of existing bookings

        Returns:
            Allocation if the request can be honored, NoAvailability otherwise
        """
        refusal = self._check_service_hours(request)
        if refusal is not None:
            decision: AvailabilityDecision = refusal
        else:
            decision = self.strategy.decide(
                request.party_size, request.date, request.time, bookings
            )

        if isinstance(decision, NoAvailability):
            log.info(
                "Reservation refused",
                mode=decision.mode.value,
                reason=decision.reason.value,
                date=request.date,
                time=request.time,
                party_size=request.party_size,
            )
        return decision

    def request_booking(
        self,
        request: BookingRequest,
        bookings: Iterable[Booking],
        booking_id: str | None = None,
    ) -> Booking | NoAvailability:
        """
        Turn a request into a Pending booking if it can be honored.

        In Advanced mode the allocated tables are attached as a tentative
        assignment; in Simple mode no tables are assigned.

        Returns:
            New Pending booking, or NoAvailability
        """
        decision = self.evaluate(request, bookings)
        if isinstance(decision, NoAvailability):
            return decision

        booking = Booking(
            id=booking_id or f"booking-{uuid4().hex[:8]}",
            date=request.date,
            time=request.time,
            adults=request.adults,
            children=request.children,
            status=BookingStatus.PENDING,
            assigned_table_ids=decision.table_ids if decision.table_ids else None,
            name=request.name,
            contact=request.contact,
        )
        log.info(
            "Booking held",
            booking_id=booking.id,
            mode=decision.mode.value,
            date=booking.date,
            time=booking.time,
            party_size=booking.party_size,
            table_ids=list(decision.table_ids),
        )
        return booking

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def confirm_booking(
        self,
        booking: Booking,
        bookings: Iterable[Booking] | None = None,
    ) -> Booking:
        """Confirm a Pending booking.

        When the current bookings are given, the confirmation is refused if
        an already confirmed booking holds one of its tables in an
        overlapping interval (Advanced) or the slot would exceed its seat
        ceiling (Simple).

        Raises:
            BookingStateError: If the booking is not Pending
            BookingConflictError: If confirming would overcommit capacity
        """
        confirmed = booking.transition_to(BookingStatus.CONFIRMED)
        if bookings is not None and self.strategy.conflicts(confirmed, bookings):
            raise BookingConflictError(
                f"Booking {booking.id} conflicts with an already confirmed booking",
                details={
                    "booking_id": booking.id,
                    "date": booking.date,
                    "time": booking.time,
                    "mode": self.mode.value,
                },
            )
        log.info("Booking confirmed", booking_id=booking.id, date=booking.date, time=booking.time)
        return confirmed

    def decline_booking(self, booking: Booking) -> Booking:
        """Decline a Pending booking.

        Raises:
            BookingStateError: If the booking is not Pending
        """
        declined = booking.transition_to(BookingStatus.DECLINED)
        log.info("Booking declined", booking_id=booking.id, date=booking.date, time=booking.time)
        return declined

    def _check_service_hours(self, request: BookingRequest) -> NoAvailability | None:
        if not self.enforce_service_hours:
            return None

        if is_closed(request.date, self.config):
            reason = NoAvailabilityReason.CLOSED
        elif request.time not in resolve_slots(request.date, self.config).slots:
            reason = NoAvailabilityReason.OUTSIDE_SERVICE_HOURS
        else:
            return None

        return NoAvailability(
            self.mode, request.date, request.time, request.party_size, reason
        )
