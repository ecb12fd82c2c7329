# backend/facility_booking/services/slots/records.py
"""
Typed records shared by the slot, occupancy, quota and admission steps.

Defaults for facility fields are resolved once, in `Facility.from_row`.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .config import BookingConfig, get_booking_config


class BookingStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, order=True)
class Slot:
    """Half-open interval [start, end)."""
    start: datetime
    end: datetime

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def matches(self, start: datetime, end: datetime) -> bool:
        return self.start == start and self.end == end


@dataclass(frozen=True)
class Facility:
    id: int
    name: str
    operating_window: str
    slot_minutes: int
    capacity: int
    enabled: bool = True

    @classmethod
    def from_row(cls, row, config: BookingConfig | None = None) -> "Facility":
        """Build from an ORM row (or any object with the same attributes)."""
        config = config or get_booking_config()
        return cls(
            id=row.id,
            name=row.name,
            operating_window=row.operating_window,
            slot_minutes=config.resolve_slot_minutes(row.slot_minutes),
            capacity=config.resolve_capacity(row.capacity),
            enabled=bool(getattr(row, "enabled", True)),
        )


@dataclass
class Booking:
    facility_id: int
    user_id: str
    starts_at: datetime
    ends_at: datetime
    party_count: int = 1
    status: BookingStatus = BookingStatus.CONFIRMED
    note: str | None = None
    id: int | None = None
    created_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None

    def __post_init__(self):
        self.status = BookingStatus(self.status)
        if self.ends_at <= self.starts_at:
            raise ValueError("Booking must end after it starts")
        if self.party_count < 1:
            raise ValueError(f"party_count must be >= 1, got {self.party_count}")

    @property
    def is_confirmed(self) -> bool:
        return self.status == BookingStatus.CONFIRMED

    @property
    def minutes(self) -> int:
        return int((self.ends_at - self.starts_at).total_seconds() // 60)

    @classmethod
    def from_row(cls, row) -> "Booking":
        return cls(
            id=row.id,
            facility_id=row.facility_id,
            user_id=row.user_id,
            starts_at=row.starts_at,
            ends_at=row.ends_at,
            party_count=row.party_count,
            status=row.status,
            note=row.note,
            created_at=row.created_at,
            cancelled_at=row.cancelled_at,
            cancelled_by=row.cancelled_by,
        )


@dataclass(frozen=True)
class BookingRequest:
    facility_id: int
    user_id: str
    starts_at: datetime
    ends_at: datetime
    party_count: int = 1
    note: str | None = None
