"""In-memory reservation book.

Reference persistence collaborator for the availability service. The
engine decides over a snapshot; this class makes "decide and store"
atomic by holding a per-date lock, so two concurrent requests for the
same evening cannot both be handed the same table from one snapshot.
A database-backed store needs the same critical section, e.g. a
serializable transaction or a row lock keyed by date.
"""

from __future__ import annotations

import threading
from collections import defaultdict

from table_engine.core.exceptions import RecordNotFoundError
from table_engine.core.timeparse import parse_date
from table_engine.log import get_logger
from table_engine.models import Booking, BookingStatus
from table_engine.services.availability import (
    AvailabilityService,
    BookingRequest,
    NoAvailability,
)

log = get_logger(__name__)


class ReservationBook:
    """Thread-safe store of bookings for one restaurant.

    One lock is created per date the book has seen and kept for the life
    of the instance; nothing prunes past dates. Fine for a process-local
    store, not for a long-running service.
    """

    def __init__(self, service: AvailabilityService, bookings: list[Booking] | None = None):
        """Initialize reservation book.

        Args:
            service: Availability service used for every decision
            bookings: Existing bookings to load
        """
        self.service = service
        self._bookings: dict[str, Booking] = {}
        self._date_locks: defaultdict[str, threading.Lock] = defaultdict(threading.Lock)
        self._guard = threading.Lock()

        for booking in bookings or []:
            self._bookings[booking.id] = booking

    def _lock_for(self, date: str) -> threading.Lock:
        with self._guard:
            return self._date_locks[date]

    def _snapshot(self, date: str) -> list[Booking]:
        with self._guard:
            return [b for b in self._bookings.values() if b.date == date]

    def _store(self, booking: Booking) -> None:
        with self._guard:
            self._bookings[booking.id] = booking

    def request(self, request: BookingRequest) -> Booking | NoAvailability:
        """Evaluate a request and store the resulting Pending booking.

        Returns:
            Stored Pending booking, or NoAvailability
        """
        with self._lock_for(request.date):
            result = self.service.request_booking(request, self._snapshot(request.date))
            if isinstance(result, Booking):
                self._store(result)
            return result

    def confirm(self, booking_id: str) -> Booking:
        """Confirm a Pending booking.

        Raises:
            RecordNotFoundError: If no booking has this id
            BookingStateError: If the booking is not Pending
            BookingConflictError: If a confirmed booking already holds its capacity
        """
        booking = self.get(booking_id)
        with self._lock_for(booking.date):
            booking = self.get(booking_id)
            confirmed = self.service.confirm_booking(booking, self._snapshot(booking.date))
            self._store(confirmed)
            return confirmed

    def decline(self, booking_id: str) -> Booking:
        """Decline a Pending booking.

        Raises:
            RecordNotFoundError: If no booking has this id
            BookingStateError: If the booking is not Pending
        """
        booking = self.get(booking_id)
        with self._lock_for(booking.date):
            booking = self.get(booking_id)
            declined = self.service.decline_booking(booking)
            self._store(declined)
            return declined

    def get(self, booking_id: str) -> Booking:
        """Get a booking by ID.

        Raises:
            RecordNotFoundError: If no booking has this id
        """
        with self._guard:
            booking = self._bookings.get(booking_id)
        if booking is None:
            raise RecordNotFoundError(
                f"Booking {booking_id} not found",
                details={"booking_id": booking_id},
            )
        return booking

    def bookings_for_date(
        self,
        date: str,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        """Bookings on a date, ordered by time, optionally filtered by status."""
        day = parse_date(date).isoformat()
        bookings = [
            b for b in self._snapshot(day)
            if status is None or b.status == status
        ]
        return sorted(bookings, key=lambda b: (b.time, b.id))

    def all(self) -> list[Booking]:
        """All bookings, newest date first (as the admin dashboard lists them)."""
        with self._guard:
            bookings = list(self._bookings.values())
        return sorted(bookings, key=lambda b: (b.date, b.time), reverse=True)

    def __len__(self) -> int:
        with self._guard:
            return len(self._bookings)
