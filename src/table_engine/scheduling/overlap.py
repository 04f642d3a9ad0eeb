"""Table occupancy across overlapping bookings."""

from __future__ import annotations

from typing import Iterable

from table_engine.core.timeparse import parse_date
from table_engine.models import Booking, BookingStatus, DurationRule
from table_engine.scheduling.duration import resolve_duration


def counted_statuses(include_pending: bool = False) -> frozenset[BookingStatus]:
    """Booking statuses that consume capacity.

    Only Confirmed bookings count by default. With ``include_pending`` a
    Pending booking soft-reserves its tables and seats too. Declined
    bookings never count.
    """
    if include_pending:
        return frozenset({BookingStatus.CONFIRMED, BookingStatus.PENDING})
    return frozenset({BookingStatus.CONFIRMED})


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open overlap test; intervals that only touch do not overlap."""
    return start_a < end_b and end_a > start_b


def booking_interval(booking: Booking, duration_rules: Iterable[DurationRule]) -> tuple[int, int]:
    """Occupied interval of an existing booking, in minutes from midnight."""
    start = booking.start_minutes
    return start, start + resolve_duration(booking.party_size, duration_rules)


def occupied_tables(
    date: str,
    start: int,
    end: int,
    bookings: Iterable[Booking],
    duration_rules: Iterable[DurationRule],
    include_pending: bool = False,
) -> set[str]:
    """Find tables already committed during a candidate interval.

    Args:
        date: Booking date (YYYY-MM-DD)
        start: Candidate start, minutes from midnight
        end: Candidate end, minutes from midnight
        bookings: Snapshot of existing bookings
        duration_rules: Duration rules used to size each existing booking
        include_pending: Count Pending bookings as holding their tables

    Returns:
        Ids of every table assigned to an overlapping booking
    """
    date = parse_date(date).isoformat()
    rules = tuple(duration_rules)
    statuses = counted_statuses(include_pending)
    occupied: set[str] = set()

    for booking in bookings:
        if booking.date != date or booking.status not in statuses:
            continue
        if not booking.assigned_table_ids:
            continue

        other_start, other_end = booking_interval(booking, rules)
        if intervals_overlap(start, end, other_start, other_end):
            occupied.update(booking.assigned_table_ids)

    return occupied
