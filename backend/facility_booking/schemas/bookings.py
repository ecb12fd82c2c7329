# backend/facility_booking/schemas/bookings.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from ..services.slots.records import BookingStatus


class BookingCreate(BaseModel):
    facility_id: int
    starts_at: datetime
    ends_at: datetime
    party_count: int = Field(1, ge=1)
    note: Optional[str] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.ends_at <= self.starts_at:
            raise ValueError("ends_at must be after starts_at")
        if self.note is not None:
            self.note = self.note.strip() or None
        return self


class BookingRead(BaseModel):
    id: int

    facility_id: int
    user_id: str

    starts_at: datetime
    ends_at: datetime

    party_count: int
    status: BookingStatus
    note: Optional[str] = None

    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by: Optional[str] = None

    model_config = {"from_attributes": True}


class BookingRejected(BaseModel):
    decision: str
    detail: str
    booked_count: int = 0
    remaining_minutes: Optional[int] = None


class BookingAccepted(BaseModel):
    decision: str = "accepted"
    booking: BookingRead
    remaining_minutes: int
