"""Error codes and exception types for booking operations."""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Booking error codes."""

    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    REMOTE_REJECTED = "REMOTE_REJECTED"


class BookingError(Exception):
    """Base booking error with code and user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class AlreadyRegisteredError(BookingError):
    """The current user already holds a booking for the event."""

    def __init__(self, event_id) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_REGISTERED,
            message="You are already registered for this event.",
        )
        self.event_id = event_id


class BookingNotFoundError(BookingError):
    """No booking with the given id is in the local collection."""

    def __init__(self, booking_id) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )
        self.booking_id = booking_id


class RemoteCallError(BookingError):
    """The booking service answered with a non-success status."""

    def __init__(self, operation: str, status_code: Optional[int], message: str) -> None:
        super().__init__(code=ErrorCode.REMOTE_REJECTED, message=message)
        self.operation = operation
        self.status_code = status_code

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message} (status {self.status_code})"
