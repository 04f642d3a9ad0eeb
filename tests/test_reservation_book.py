"""Tests for the in-memory reservation book."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from table_engine.core.exceptions import (
    BookingConflictError,
    BookingStateError,
    RecordNotFoundError,
)
from table_engine.models import BookingStatus
from table_engine.services import (
    AvailabilityService,
    BookingRequest,
    NoAvailability,
    ReservationBook,
)

FRIDAY = "2025-03-14"
SUNDAY = "2025-03-16"


@pytest.fixture
def book(advanced_config) -> ReservationBook:
    """Reservation book with the default hold policy."""
    return ReservationBook(AvailabilityService(advanced_config))


class TestReservationBook:
    """Test storing and deciding bookings."""

    def test_request_stores_pending_booking(self, book):
        """Test an accepted request is stored as Pending."""
        booking = book.request(BookingRequest(date=FRIDAY, time="19:00", adults=2, name="Bianchi"))
        assert booking.status == BookingStatus.PENDING
        assert book.get(booking.id) == booking
        assert len(book) == 1

    def test_refusal_not_stored(self, book):
        """Test a refused request leaves the book unchanged."""
        result = book.request(BookingRequest(date=FRIDAY, time="19:00", adults=12))
        assert isinstance(result, NoAvailability)
        assert len(book) == 0

    def test_confirm_and_decline(self, book):
        """Test staff decisions replace the stored record."""
        first = book.request(BookingRequest(date=FRIDAY, time="19:00", adults=2))
        second = book.request(BookingRequest(date=FRIDAY, time="21:00", adults=2))

        assert book.confirm(first.id).status == BookingStatus.CONFIRMED
        assert book.decline(second.id).status == BookingStatus.DECLINED
        assert book.get(first.id).status == BookingStatus.CONFIRMED
        assert book.get(second.id).status == BookingStatus.DECLINED

    def test_confirmed_booking_blocks_later_requests(self, book):
        """Test a confirmed table is no longer offered."""
        first = book.request(BookingRequest(date=FRIDAY, time="19:00", adults=2))
        book.confirm(first.id)
        second = book.request(BookingRequest(date=FRIDAY, time="19:30", adults=2))
        assert first.assigned_table_ids == ("T1",)
        assert second.assigned_table_ids == ("T2",)

    def test_competing_holds(self, book):
        """Test two holds on one table: the second confirmation is refused."""
        first = book.request(BookingRequest(date=FRIDAY, time="19:00", adults=2))
        second = book.request(BookingRequest(date=FRIDAY, time="19:00", adults=2))
        assert first.assigned_table_ids == second.assigned_table_ids

        book.confirm(second.id)
        with pytest.raises(BookingConflictError):
            book.confirm(first.id)
        assert book.get(first.id).status == BookingStatus.PENDING

        book.decline(first.id)
        assert book.get(first.id).status == BookingStatus.DECLINED

    def test_decided_booking_is_final(self, book):
        """Test a Declined booking cannot be confirmed afterwards."""
        booking = book.request(BookingRequest(date=FRIDAY, time="19:00", adults=2))
        book.decline(booking.id)
        with pytest.raises(BookingStateError):
            book.confirm(booking.id)

    def test_unknown_id(self, book):
        """Test lookups of unknown ids raise RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError) as exc_info:
            book.confirm("missing")
        assert exc_info.value.status_code == 404
        assert exc_info.value.details == {"booking_id": "missing"}

    def test_bookings_for_date(self, book, make_booking):
        """Test per-date listing is ordered by time and filterable by status."""
        book = ReservationBook(
            book.service,
            [
                make_booking("20:00", adults=2, tables=("T1",)),
                make_booking("19:00", adults=2, status=BookingStatus.PENDING, tables=("T2",)),
                make_booking("19:00", adults=2, date=SUNDAY, tables=("T1",)),
            ],
        )
        assert [b.time for b in book.bookings_for_date(FRIDAY)] == ["19:00", "20:00"]
        confirmed = book.bookings_for_date(FRIDAY, status=BookingStatus.CONFIRMED)
        assert [b.time for b in confirmed] == ["20:00"]

    def test_all_newest_first(self, book, make_booking):
        """Test the full listing starts with the latest date."""
        book = ReservationBook(
            book.service,
            [
                make_booking("19:00", adults=2),
                make_booking("12:00", adults=2, date=SUNDAY),
            ],
        )
        assert [b.date for b in book.all()] == [SUNDAY, FRIDAY]


class TestConcurrentRequests:
    """Test that concurrent requests never share a table."""

    def test_parallel_requests_with_holds(self, advanced_config):
        """Test racing requests for one evening get distinct tables."""
        book = ReservationBook(AvailabilityService(advanced_config, pending_holds_capacity=True))
        request = BookingRequest(date=FRIDAY, time="19:00", adults=2)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: book.request(request), range(16)))

        held = [r for r in results if not isinstance(r, NoAvailability)]
        assert len(held) == 2
        assigned = [tid for b in held for tid in b.assigned_table_ids]
        assert sorted(assigned) == ["T1", "T2"]
        assert len(book) == 2
