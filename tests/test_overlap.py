"""Tests for overlap detection between bookings."""

from table_engine.models import BookingStatus
from table_engine.scheduling import (
    booking_interval,
    counted_statuses,
    intervals_overlap,
    occupied_tables,
)

FRIDAY = "2025-03-14"
SATURDAY = "2025-03-15"


def minutes(hhmm: str) -> int:
    hours, mins = hhmm.split(":")
    return int(hours) * 60 + int(mins)


class TestIntervals:
    """Test the half-open interval rule."""

    def test_touching_intervals_do_not_overlap(self):
        """Test a booking ending at 20:00 does not clash with one starting at 20:00."""
        assert not intervals_overlap(minutes("20:00"), minutes("21:30"), minutes("18:00"), minutes("20:00"))
        assert not intervals_overlap(minutes("18:00"), minutes("20:00"), minutes("20:00"), minutes("21:30"))

    def test_partial_overlap(self):
        """Test intervals sharing one minute overlap."""
        assert intervals_overlap(minutes("19:59"), minutes("21:00"), minutes("18:00"), minutes("20:00"))

    def test_containment(self):
        """Test an interval inside another overlaps."""
        assert intervals_overlap(minutes("19:00"), minutes("19:30"), minutes("18:00"), minutes("21:00"))

    def test_booking_interval_uses_own_party_size(self, make_booking, duration_rules):
        """Test each existing booking is sized by its own guests."""
        family = make_booking("18:00", adults=3, children=2)
        assert booking_interval(family, duration_rules) == (minutes("18:00"), minutes("20:30"))


class TestOccupiedTables:
    """Test which tables an existing booking set occupies."""

    def test_confirmed_overlapping_booking_occupies_tables(self, make_booking, duration_rules):
        """Test a confirmed booking at 19:00 for 4 guests holds T1 until 21:00."""
        bookings = [make_booking("19:00", adults=4, tables=("T1",))]
        start = minutes("20:30")
        assert occupied_tables(FRIDAY, start, start + 120, bookings, duration_rules) == {"T1"}

    def test_booking_ending_at_start_is_free(self, make_booking, duration_rules):
        """Test a booking ending exactly at the candidate start does not occupy."""
        bookings = [make_booking("18:00", adults=4, tables=("T1",))]
        start = minutes("20:00")
        assert occupied_tables(FRIDAY, start, start + 90, bookings, duration_rules) == set()

    def test_booking_starting_at_end_is_free(self, make_booking, duration_rules):
        """Test a booking starting exactly at the candidate end does not occupy."""
        bookings = [make_booking("20:00", adults=2, tables=("T1",))]
        start = minutes("18:30")
        assert occupied_tables(FRIDAY, start, start + 90, bookings, duration_rules) == set()

    def test_union_of_overlapping_bookings(self, make_booking, duration_rules):
        """Test tables of all overlapping bookings are combined."""
        bookings = [
            make_booking("19:00", adults=6, tables=("T1", "T2")),
            make_booking("19:30", adults=2, tables=("T3",)),
            make_booking("12:00", adults=2, tables=("T4",)),
        ]
        start = minutes("20:00")
        assert occupied_tables(FRIDAY, start, start + 90, bookings, duration_rules) == {"T1", "T2", "T3"}

    def test_other_dates_ignored(self, make_booking, duration_rules):
        """Test bookings on another date never occupy."""
        bookings = [make_booking("19:00", adults=2, date=SATURDAY, tables=("T1",))]
        start = minutes("19:00")
        assert occupied_tables(FRIDAY, start, start + 90, bookings, duration_rules) == set()

    def test_pending_ignored_by_default(self, make_booking, duration_rules):
        """Test Pending holds do not occupy tables unless enabled."""
        bookings = [make_booking("19:00", adults=2, status=BookingStatus.PENDING, tables=("T1",))]
        start = minutes("19:00")
        assert occupied_tables(FRIDAY, start, start + 90, bookings, duration_rules) == set()
        assert occupied_tables(
            FRIDAY, start, start + 90, bookings, duration_rules, include_pending=True
        ) == {"T1"}

    def test_declined_never_counted(self, make_booking, duration_rules):
        """Test Declined bookings are ignored even with pending holds enabled."""
        bookings = [make_booking("19:00", adults=2, status=BookingStatus.DECLINED, tables=("T1",))]
        start = minutes("19:00")
        assert occupied_tables(
            FRIDAY, start, start + 90, bookings, duration_rules, include_pending=True
        ) == set()

    def test_booking_without_tables_ignored(self, make_booking, duration_rules):
        """Test bookings with no assignment (Simple mode) are skipped."""
        bookings = [make_booking("19:00", adults=2), make_booking("19:00", adults=2, tables=())]
        start = minutes("19:00")
        assert occupied_tables(FRIDAY, start, start + 90, bookings, duration_rules) == set()

    def test_counted_statuses(self):
        """Test the status set for both hold policies."""
        assert counted_statuses() == {BookingStatus.CONFIRMED}
        assert counted_statuses(include_pending=True) == {
            BookingStatus.CONFIRMED,
            BookingStatus.PENDING,
        }
