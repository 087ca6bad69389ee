from booking_client.schemas.booking import (
    Booking, BookingId, EventId, EventRef, STATUS_PENDING, STATUS_CONFIRMED,
)
from booking_client.schemas.outcome import BookingOutcome, OutcomeStatus

__all__ = [
    "Booking", "BookingId", "EventId", "EventRef", "STATUS_PENDING", "STATUS_CONFIRMED",
    "BookingOutcome", "OutcomeStatus",
]
