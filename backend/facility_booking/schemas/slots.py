# backend/facility_booking/schemas/slots.py
"""
Pydantic schemas for slots, occupancy and quota API.
"""

from datetime import date, datetime
from pydantic import BaseModel, Field


class SlotRead(BaseModel):
    """A single bookable slot, half-open [start, end)."""
    start: datetime
    end: datetime

    model_config = {"from_attributes": True}


class SlotsDayResponse(BaseModel):
    facility_id: int
    date: date
    slot_minutes: int
    capacity: int
    slots: list[SlotRead]

    model_config = {"from_attributes": True}


class OccupancyEntry(BaseModel):
    start: datetime
    end: datetime
    booked_count: int
    remaining: int = Field(description="capacity - booked_count, never below 0")


class OccupancyResponse(BaseModel):
    facility_id: int
    date: date
    capacity: int
    slots: list[OccupancyEntry]
    misaligned_booking_ids: list[int] = Field(
        default_factory=list,
        description="confirmed bookings that match no slot of the current grid",
    )


class QuotaResponse(BaseModel):
    user_id: str
    facility_id: int
    date: date
    daily_cap_minutes: int
    used_minutes: int
    remaining_minutes: int
    remaining_hours_part: int
    remaining_minutes_part: int
