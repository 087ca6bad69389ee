"""
Event Booking Client

Client-side state of a user's event bookings, kept in sync with a remote
booking service through optimistic mutations:
- Pending bookings show up before the server confirms them
- Failed registrations and cancellations roll back to a consistent state
- A shared loading flag and error slot for the UI
"""

from booking_client.schemas.booking import Booking, EventRef
from booking_client.schemas.outcome import BookingOutcome, OutcomeStatus
from booking_client.services.booking_state import (
    BookingStateManager,
    close_booking_manager,
    get_booking_manager,
)

__all__ = [
    "Booking", "EventRef", "BookingOutcome", "OutcomeStatus",
    "BookingStateManager", "get_booking_manager", "close_booking_manager",
]
