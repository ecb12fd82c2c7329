# backend/facility_booking/services/collaborators.py
"""
Interfaces of the engine's external collaborators.

The engine never talks to SQL, Redis or the identity provider directly; it
goes through these. `store.py` holds the SQLAlchemy implementations.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from .slots.records import Booking, BookingStatus, Facility

OPERATOR_ROLES = frozenset({"admin", "operator"})


@dataclass(frozen=True)
class CurrentUser:
    id: str
    role: str = "resident"

    @property
    def is_operator(self) -> bool:
        return self.role in OPERATOR_ROLES


class FacilityDirectory(Protocol):
    def get_facility(self, facility_id: int) -> Facility | None: ...


class BookingStore(Protocol):
    def list_bookings(self, facility_id: int, target_date: date) -> list[Booking]:
        """All bookings (confirmed and cancelled) starting on target_date."""
        ...

    def get_booking(self, booking_id: int) -> Booking | None: ...

    def insert_booking(self, booking: Booking, capacity: int) -> Booking:
        """
        Persist a confirmed booking.

        Must re-check the slot's confirmed party count against `capacity`
        atomically with the insert, raising BookingConflict when it no
        longer fits.
        """
        ...

    def update_booking_status(
        self,
        booking_id: int,
        status: BookingStatus,
        actor_id: str,
        at: datetime,
    ) -> tuple[Booking, bool]:
        """
        Conditionally move a booking to `status`.

        Returns the stored booking and whether this call changed it; a
        booking already in `status` is left untouched. Raises BookingNotFound.
        """
        ...


class ChangeListener(Protocol):
    def booking_changed(self, event_type: str, booking: Booking) -> None: ...
