# backend/facility_booking/schemas/facilities.py

from pydantic import BaseModel


class FacilityRead(BaseModel):
    id: int
    name: str
    operating_window: str
    slot_minutes: int
    capacity: int
    enabled: bool

    model_config = {"from_attributes": True}
