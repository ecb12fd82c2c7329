# backend/facility_booking/services/store.py
"""
SQLAlchemy-backed facility directory and booking store.
"""

import logging
from datetime import date, datetime, timedelta

from sqlalchemy import DateTime, Integer, Text, func, insert, literal, select, update
from sqlalchemy.orm import Session

from ..models.generated import Bookings as DBBookings, Facilities as DBFacilities
from .errors import BookingConflict, BookingNotFound
from .slots.config import BookingConfig, get_booking_config
from .slots.records import Booking, BookingStatus, Facility

logger = logging.getLogger(__name__)


class SqlFacilityDirectory:
    def __init__(self, db: Session, config: BookingConfig | None = None):
        self.db = db
        self.config = config or get_booking_config()

    def get_facility(self, facility_id: int) -> Facility | None:
        row = self.db.get(DBFacilities, facility_id)
        if row is None:
            return None
        return Facility.from_row(row, self.config)

    def list_facilities(self, enabled_only: bool = True) -> list[Facility]:
        query = self.db.query(DBFacilities)
        if enabled_only:
            query = query.filter(DBFacilities.enabled == 1)
        return [Facility.from_row(row, self.config) for row in query.order_by(DBFacilities.id)]


class SqlBookingStore:
    def __init__(self, db: Session):
        self.db = db

    # ── Read ─────────────────────────────────────────────────────────────

    def list_bookings(self, facility_id: int, target_date: date) -> list[Booking]:
        day_start, day_end = _day_bounds(target_date)
        rows = (
            self.db.query(DBBookings)
            .filter(
                DBBookings.facility_id == facility_id,
                DBBookings.starts_at >= day_start,
                DBBookings.starts_at < day_end,
            )
            .order_by(DBBookings.starts_at, DBBookings.id)
            .all()
        )
        return [Booking.from_row(r) for r in rows]

    def list_user_bookings(
        self,
        user_id: str,
        target_date: date,
        facility_id: int | None = None,
    ) -> list[Booking]:
        """Confirmed bookings of a resident on a date, optionally for one facility."""
        day_start, day_end = _day_bounds(target_date)
        query = self.db.query(DBBookings).filter(
            DBBookings.user_id == user_id,
            DBBookings.status == BookingStatus.CONFIRMED.value,
            DBBookings.starts_at >= day_start,
            DBBookings.starts_at < day_end,
        )
        if facility_id is not None:
            query = query.filter(DBBookings.facility_id == facility_id)
        return [Booking.from_row(r) for r in query.order_by(DBBookings.starts_at)]

    def get_booking(self, booking_id: int) -> Booking | None:
        row = self.db.get(DBBookings, booking_id)
        return Booking.from_row(row) if row else None

    # ── Write ────────────────────────────────────────────────────────────

    def insert_booking(self, booking: Booking, capacity: int) -> Booking:
        """
        Insert a confirmed booking if the slot still has room.

        The capacity check is part of the INSERT ... SELECT statement itself,
        so two submissions racing for the last places cannot both land.
        """
        occupied = (
            select(func.coalesce(func.sum(DBBookings.party_count), 0))
            .where(
                DBBookings.facility_id == booking.facility_id,
                DBBookings.starts_at == booking.starts_at,
                DBBookings.ends_at == booking.ends_at,
                DBBookings.status == BookingStatus.CONFIRMED.value,
            )
            .correlate(None)
            .scalar_subquery()
        )
        created_at = booking.created_at or datetime.now()

        values = select(
            literal(booking.facility_id, Integer()),
            literal(booking.user_id, Text()),
            literal(booking.starts_at, DateTime()),
            literal(booking.ends_at, DateTime()),
            literal(booking.party_count, Integer()),
            literal(BookingStatus.CONFIRMED.value, Text()),
            literal(booking.note, Text()),
            literal(created_at, DateTime()),
        ).where(occupied + booking.party_count <= capacity)

        table = DBBookings.__table__
        stmt = (
            insert(table)
            .from_select(
                [
                    table.c.facility_id,
                    table.c.user_id,
                    table.c.starts_at,
                    table.c.ends_at,
                    table.c.party_count,
                    table.c.status,
                    table.c.note,
                    table.c.created_at,
                ],
                values,
            )
            .returning(table.c.id)
        )

        try:
            new_id = self.db.execute(stmt).scalar()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if new_id is None:
            logger.warning(
                f"Insert refused: facility {booking.facility_id} slot "
                f"{booking.starts_at.isoformat()} has no room for {booking.party_count}"
            )
            raise BookingConflict(
                f"Slot {booking.starts_at.isoformat()} on facility {booking.facility_id} is full"
            )

        return self.get_booking(new_id)

    def update_booking_status(
        self,
        booking_id: int,
        status: BookingStatus,
        actor_id: str,
        at: datetime,
    ) -> tuple[Booking, bool]:
        """
        Move a booking to `status` unless it is already there.

        The status guard is part of the UPDATE, so of two concurrent cancels
        only one changes the row. Returns the stored booking and whether this
        call changed it.
        """
        status = BookingStatus(status)
        values = {"status": status.value}
        if status == BookingStatus.CANCELLED:
            values.update(cancelled_at=at, cancelled_by=actor_id)

        table = DBBookings.__table__
        stmt = (
            update(table)
            .where(table.c.id == booking_id, table.c.status != status.value)
            .values(**values)
        )
        try:
            changed = self.db.execute(stmt).rowcount == 1
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        row = self.db.get(DBBookings, booking_id, populate_existing=True)
        if row is None:
            raise BookingNotFound(booking_id)
        return Booking.from_row(row), changed


def _day_bounds(target_date: date) -> tuple[datetime, datetime]:
    day_start = datetime.combine(target_date, datetime.min.time())
    return day_start, day_start + timedelta(days=1)
