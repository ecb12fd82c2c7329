# backend/facility_booking/routers/bookings.py
# Bookings are never deleted: DELETE = 405, cancellation goes through PATCH /{id}/cancel

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from ..schemas.bookings import (
    BookingAccepted,
    BookingCreate,
    BookingRead,
    BookingRejected,
)
from ..services.collaborators import CurrentUser
from ..services.engine import BookingEngine
from ..services.errors import (
    BookingForbidden,
    BookingNotFound,
    ConfigError,
    FacilityNotFound,
    FacilityUnavailable,
)
from ..services.slots.records import BookingRequest
from ..services.store import SqlBookingStore
from .deps import get_current_user, get_engine, get_store

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("/", response_model=list[BookingRead])
def list_bookings(
    facility_id: int,
    target_date: date = Query(..., alias="date"),
    engine: BookingEngine = Depends(get_engine),
):
    """All bookings of a facility on a day, confirmed and cancelled, by start time."""
    try:
        return engine.list_bookings(facility_id, target_date)
    except FacilityNotFound:
        raise HTTPException(status_code=404, detail="Facility not found")


@router.get("/mine", response_model=list[BookingRead])
def list_my_bookings(
    target_date: date = Query(..., alias="date"),
    facility_id: int | None = None,
    user: CurrentUser = Depends(get_current_user),
    store: SqlBookingStore = Depends(get_store),
):
    """Caller's confirmed bookings on a day."""
    return store.list_user_bookings(user.id, target_date, facility_id)


@router.get("/{id}", response_model=BookingRead)
def get_booking(id: int, store: SqlBookingStore = Depends(get_store)):
    obj = store.get_booking(id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post(
    "/",
    response_model=BookingAccepted,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": BookingRejected}},
)
def create_booking(
    data: BookingCreate,
    user: CurrentUser = Depends(get_current_user),
    engine: BookingEngine = Depends(get_engine),
):
    request = BookingRequest(
        facility_id=data.facility_id,
        user_id=user.id,
        starts_at=_naive(data.starts_at),
        ends_at=_naive(data.ends_at),
        party_count=data.party_count,
        note=data.note,
    )

    try:
        result = engine.submit_booking(request)
    except FacilityNotFound:
        raise HTTPException(status_code=404, detail="Facility not found")
    except FacilityUnavailable:
        raise HTTPException(status_code=400, detail="Facility is not enabled")
    except ConfigError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "Facility unavailable for booking today",
                "reason": e.reason.value,
            },
        )

    if not result.accepted:
        body = BookingRejected(
            decision=result.decision.value,
            detail=result.message,
            booked_count=result.booked_count,
            remaining_minutes=result.quota.remaining_minutes if result.quota else None,
        )
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=body.model_dump())

    return BookingAccepted(
        booking=BookingRead.model_validate(result.booking),
        remaining_minutes=result.quota.remaining_minutes,
    )


@router.patch("/{id}/cancel", response_model=BookingRead)
def cancel_booking(
    id: int,
    user: CurrentUser = Depends(get_current_user),
    engine: BookingEngine = Depends(get_engine),
):
    try:
        return engine.cancel_booking(id, user)
    except BookingNotFound:
        raise HTTPException(status_code=404, detail="Not found")
    except BookingForbidden:
        raise HTTPException(status_code=403, detail="Only the owner or an operator can cancel this booking")


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


def _naive(value):
    """Slots are local wall-clock times; drop any offset the client sent."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value
