"""Core primitives shared by the engine: errors and time parsing."""

from table_engine.core.exceptions import (
    TableEngineError,
    ConfigurationError,
    InputError,
    DateParseError,
    TimeParseError,
    PartySizeError,
    BookingError,
    BookingStateError,
    BookingConflictError,
    RecordNotFoundError,
    wrap_exception,
)
from table_engine.core.timeparse import format_minutes, parse_date, parse_time

__all__ = [
    # Exceptions
    "TableEngineError",
    "ConfigurationError",
    "InputError",
    "DateParseError",
    "TimeParseError",
    "PartySizeError",
    "BookingError",
    "BookingStateError",
    "BookingConflictError",
    "RecordNotFoundError",
    "wrap_exception",
    # Time parsing
    "parse_date",
    "parse_time",
    "format_minutes",
]
