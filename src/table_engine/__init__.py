"""Restaurant table-reservation availability engine.

Given a party size, a date and a requested time, decides whether a
reservation can be honored and which tables satisfy it.
"""

__version__ = "0.1.0"

from table_engine.models import (
    Booking,
    BookingStatus,
    CombinationRule,
    DayOfWeek,
    DurationRule,
    OperatingMode,
    RestaurantConfig,
    ServiceWindow,
    Table,
)
from table_engine.services import (
    Allocation,
    AvailabilityService,
    BookingRequest,
    NoAvailability,
    NoAvailabilityReason,
    ReservationBook,
)

__all__ = [
    # Models
    "Booking",
    "BookingStatus",
    "CombinationRule",
    "DayOfWeek",
    "DurationRule",
    "OperatingMode",
    "RestaurantConfig",
    "ServiceWindow",
    "Table",
    # Services
    "Allocation",
    "AvailabilityService",
    "BookingRequest",
    "NoAvailability",
    "NoAvailabilityReason",
    "ReservationBook",
]
