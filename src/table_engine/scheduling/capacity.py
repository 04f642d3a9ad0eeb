"""Seat capacity gate for Simple mode.

Counts guests per exact slot time. Unlike the Advanced allocator this
ignores how long a party stays: a 19:00 booking does not consume seats
at 19:30.
"""

from __future__ import annotations

from typing import Iterable

from table_engine.core.timeparse import parse_date, parse_time
from table_engine.models import Booking
from table_engine.scheduling.overlap import counted_statuses


def seats_taken(
    date: str,
    time: str,
    bookings: Iterable[Booking],
    include_pending: bool = False,
) -> int:
    """Guests already booked for an exact date and slot time."""
    date = parse_date(date).isoformat()
    parse_time(time)
    statuses = counted_statuses(include_pending)
    return sum(
        b.party_size
        for b in bookings
        if b.date == date and b.time == time and b.status in statuses
    )


def check_capacity(
    party_size: int,
    date: str,
    time: str,
    bookings: Iterable[Booking],
    max_guests_per_slot: int,
    include_pending: bool = False,
) -> bool:
    """Whether a party still fits in a slot.

    Args:
        party_size: Number of guests
        date: Booking date (YYYY-MM-DD)
        time: Slot time (HH:MM), matched exactly
        bookings: Snapshot of existing bookings
        max_guests_per_slot: Seat ceiling per slot (inclusive)
        include_pending: Count Pending bookings against the ceiling

    Returns:
        True if the party can be accepted
    """
    taken = seats_taken(date, time, bookings, include_pending=include_pending)
    return taken + party_size <= max_guests_per_slot
