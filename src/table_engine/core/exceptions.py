"""Table Engine Exception Hierarchy.

Provides structured error handling with context preservation
and HTTP status code mapping for the API layer that wraps the engine.

A refused reservation is not an error: allocators return a
``NoAvailability`` value. Exceptions are reserved for bad configuration,
malformed input and illegal booking transitions.
"""

from __future__ import annotations

from typing import Any


class TableEngineError(Exception):
    """Base exception for all Table Engine errors.

    Provides:
    - Structured error context
    - HTTP status code mapping
    - Logging-friendly representation
    """

    status_code: int = 500
    error_code: str = "TABLE_ENGINE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Additional context for debugging
            cause: Original exception if wrapping
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    def __str__(self) -> str:
        """String representation for logging."""
        parts = [f"{self.error_code}: {self.message}"]
        if self.details:
            parts.append(f"details={self.details}")
        if self.cause:
            parts.append(f"cause={self.cause}")
        return " | ".join(parts)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(TableEngineError):
    """Restaurant or engine configuration rejected at load time."""

    status_code = 422
    error_code = "CONFIGURATION_ERROR"


# =============================================================================
# Input Errors
# =============================================================================


class InputError(TableEngineError):
    """Base class for malformed request input."""

    status_code = 400
    error_code = "INVALID_INPUT"


class DateParseError(InputError):
    """Date is not a valid YYYY-MM-DD calendar date."""

    error_code = "INVALID_DATE"


class TimeParseError(InputError):
    """Time is not a valid HH:MM clock time."""

    error_code = "INVALID_TIME"


class PartySizeError(InputError):
    """Party size is not a positive number of guests."""

    error_code = "INVALID_PARTY_SIZE"


# =============================================================================
# Booking Errors
# =============================================================================


class BookingError(TableEngineError):
    """Base class for booking lifecycle errors."""

    status_code = 409
    error_code = "BOOKING_ERROR"


class BookingStateError(BookingError):
    """Requested status change is not allowed from the current status."""

    error_code = "INVALID_BOOKING_TRANSITION"


class BookingConflictError(BookingError):
    """Confirming would double-book a table or overfill a slot."""

    error_code = "BOOKING_CONFLICT"


class RecordNotFoundError(BookingError):
    """Requested booking not found."""

    status_code = 404
    error_code = "RECORD_NOT_FOUND"


# =============================================================================
# Utility Functions
# =============================================================================


def wrap_exception(
    exc: Exception,
    wrapper_class: type[TableEngineError] = TableEngineError,
    message: str | None = None,
    **details: Any,
) -> TableEngineError:
    """Wrap a generic exception in a TableEngineError.

    Args:
        exc: Original exception to wrap
        wrapper_class: TableEngineError subclass to use
        message: Override message (defaults to str(exc))
        **details: Additional context details

    Returns:
        Wrapped TableEngineError instance
    """
    return wrapper_class(
        message=message or str(exc),
        details=details or None,
        cause=exc,
    )
