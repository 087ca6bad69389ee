"""
Structured outcomes returned by every booking state operation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from booking_client.schemas.booking import Booking


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class BookingOutcome:
    operation: str  # refresh, register, cancel
    status: OutcomeStatus
    booking: Optional[Booking] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS
