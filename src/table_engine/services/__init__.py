"""Service layer: availability decisions and the reference reservation book."""

from table_engine.services.availability import (
    AvailabilityService,
    AvailabilityDecision,
    AllocationStrategy,
    TableAllocationStrategy,
    SeatCapacityStrategy,
    STRATEGIES,
    BookingRequest,
    Allocation,
    NoAvailability,
    NoAvailabilityReason,
)
from table_engine.services.reservation_book import ReservationBook

__all__ = [
    "AvailabilityService",
    "AvailabilityDecision",
    "AllocationStrategy",
    "TableAllocationStrategy",
    "SeatCapacityStrategy",
    "STRATEGIES",
    "BookingRequest",
    "Allocation",
    "NoAvailability",
    "NoAvailabilityReason",
    "ReservationBook",
]
