"""
Pydantic schemas for booking records and the events they refer to.

Wire names follow the booking service (camelCase); Python code uses
snake_case through field aliases.
"""

from typing import Optional, Union
from pydantic import BaseModel, Field, field_validator

BookingId = Union[int, str]
EventId = Union[int, str]

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"


class EventRef(BaseModel):
    id: EventId
    title: str = Field(..., min_length=1)

    model_config = {"from_attributes": True}

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, value: EventId) -> EventId:
        if isinstance(value, str) and not value.strip():
            raise ValueError("event id must not be empty")
        return value


class Booking(BaseModel):
    id: BookingId
    user_id: Union[int, str] = Field(..., alias="userId")
    event_id: EventId = Field(..., alias="eventId")
    event_title: Optional[str] = Field(None, alias="eventTitle")
    status: str

    # Server records are canonical: keep whatever else they carry.
    model_config = {"populate_by_name": True, "extra": "allow", "frozen": True}

    @property
    def is_pending(self) -> bool:
        return self.status == STATUS_PENDING

    def to_payload(self, **overrides) -> dict:
        """Wire representation, with field overrides applied (by wire name)."""
        payload = self.model_dump(by_alias=True)
        payload.update(overrides)
        return payload
