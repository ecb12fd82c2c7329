# backend/facility_booking/routers/facilities.py
"""
Facility availability endpoints.

GET /facilities                      - bookable facilities
GET /facilities/{id}/slots?date=     - slot grid for a day
GET /facilities/{id}/occupancy?date= - booked headcount per slot
GET /facilities/{id}/quota?date=     - caller's remaining daily minutes
"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.facilities import FacilityRead
from ..schemas.slots import (
    OccupancyEntry,
    OccupancyResponse,
    QuotaResponse,
    SlotRead,
    SlotsDayResponse,
)
from ..services.collaborators import CurrentUser
from ..services.engine import BookingEngine
from ..services.errors import ConfigError, FacilityNotFound
from ..services.slots.records import Facility
from ..services.store import SqlFacilityDirectory
from .deps import get_current_user, get_engine

router = APIRouter(prefix="/facilities", tags=["facilities"])


@router.get("/", response_model=list[FacilityRead])
def list_facilities(db: Session = Depends(get_db)):
    return SqlFacilityDirectory(db).list_facilities()


@router.get("/{facility_id}/slots", response_model=SlotsDayResponse)
def get_slots(
    facility_id: int,
    target_date: date = Query(..., alias="date"),
    engine: BookingEngine = Depends(get_engine),
):
    """Slot grid for a facility on a day. Past slots are included."""
    try:
        facility = _bookable_facility(engine, facility_id)
        slots = engine.get_slots(facility_id, target_date)
    except FacilityNotFound:
        raise HTTPException(status_code=404, detail="Facility not found")
    except ConfigError as e:
        raise _unavailable(e.reason.value)

    return SlotsDayResponse(
        facility_id=facility_id,
        date=target_date,
        slot_minutes=facility.slot_minutes,
        capacity=facility.capacity,
        slots=[SlotRead(start=s.start, end=s.end) for s in slots],
    )


@router.get("/{facility_id}/occupancy", response_model=OccupancyResponse)
def get_occupancy(
    facility_id: int,
    target_date: date = Query(..., alias="date"),
    engine: BookingEngine = Depends(get_engine),
):
    try:
        facility = _bookable_facility(engine, facility_id)
        occupancy, misaligned = engine.get_occupancy_report(facility_id, target_date)
    except FacilityNotFound:
        raise HTTPException(status_code=404, detail="Facility not found")
    except ConfigError as e:
        raise _unavailable(e.reason.value)

    return OccupancyResponse(
        facility_id=facility_id,
        date=target_date,
        capacity=facility.capacity,
        slots=[
            OccupancyEntry(
                start=slot.start,
                end=slot.end,
                booked_count=count,
                remaining=max(0, facility.capacity - count),
            )
            for slot, count in occupancy.items()
        ],
        misaligned_booking_ids=[b.id for b in misaligned],
    )


@router.get("/{facility_id}/quota", response_model=QuotaResponse)
def get_quota(
    facility_id: int,
    target_date: date = Query(..., alias="date"),
    user: CurrentUser = Depends(get_current_user),
    engine: BookingEngine = Depends(get_engine),
):
    try:
        quota = engine.get_quota(user.id, facility_id, target_date)
    except FacilityNotFound:
        raise HTTPException(status_code=404, detail="Facility not found")

    hours, minutes = quota.remaining_breakdown()
    return QuotaResponse(
        user_id=user.id,
        facility_id=facility_id,
        date=target_date,
        daily_cap_minutes=quota.daily_cap_minutes,
        used_minutes=quota.used_minutes,
        remaining_minutes=quota.remaining_minutes,
        remaining_hours_part=hours,
        remaining_minutes_part=minutes,
    )


def _bookable_facility(engine: BookingEngine, facility_id: int) -> Facility:
    facility = engine.get_facility(facility_id)
    if not facility.enabled:
        raise _unavailable("disabled")
    return facility


def _unavailable(reason: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "error": "Facility unavailable for booking today",
            "reason": reason,
        },
    )
