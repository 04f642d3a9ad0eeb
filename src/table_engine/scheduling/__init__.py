"""Availability building blocks.

Pure functions over a configuration value and a booking snapshot:
- Opening hours and slot resolution
- Party-size based occupancy durations
- Overlap detection between bookings
- Table allocation (Advanced mode)
- Seat capacity gate (Simple mode)
"""

# Opening hours
from table_engine.scheduling.schedule import (
    ResolvedSchedule,
    SlotGroup,
    resolve_slots,
    window_slots,
    is_closed,
    is_valid_slot,
    next_open_date,
)

# Durations
from table_engine.scheduling.duration import (
    DEFAULT_DURATION_MINUTES,
    resolve_duration,
)

# Overlap
from table_engine.scheduling.overlap import (
    counted_statuses,
    intervals_overlap,
    booking_interval,
    occupied_tables,
)

# Advanced mode
from table_engine.scheduling.allocator import (
    allocate_tables,
    find_single_table,
    find_table_combination,
)

# Simple mode
from table_engine.scheduling.capacity import (
    check_capacity,
    seats_taken,
)

__all__ = [
    # Opening hours
    "ResolvedSchedule",
    "SlotGroup",
    "resolve_slots",
    "window_slots",
    "is_closed",
    "is_valid_slot",
    "next_open_date",
    # Durations
    "DEFAULT_DURATION_MINUTES",
    "resolve_duration",
    # Overlap
    "counted_statuses",
    "intervals_overlap",
    "booking_interval",
    "occupied_tables",
    # Advanced mode
    "allocate_tables",
    "find_single_table",
    "find_table_combination",
    # Simple mode
    "check_capacity",
    "seats_taken",
]
