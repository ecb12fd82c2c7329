"""Shared fakes and utilities for unit tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Tuple

from facility_booking.services.errors import BookingConflict, BookingNotFound
from facility_booking.services.slots.records import Booking, BookingStatus, Facility

DAY = date(2030, 1, 15)
MORNING = datetime(2030, 1, 15, 8, 0)


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


def make_facility(**overrides: Any) -> Facility:
    data = {
        "id": 1,
        "name": "Pool",
        "operating_window": "09:00-21:00",
        "slot_minutes": 60,
        "capacity": 10,
        "enabled": True,
    }
    data.update(overrides)
    return Facility(**data)


def make_booking(
    start_hour: int,
    minutes: int = 60,
    user_id: str = "r1",
    party_count: int = 1,
    status: BookingStatus = BookingStatus.CONFIRMED,
    facility_id: int = 1,
    booking_id: Optional[int] = None,
) -> Booking:
    start = at(start_hour)
    return Booking(
        id=booking_id,
        facility_id=facility_id,
        user_id=user_id,
        starts_at=start,
        ends_at=start + timedelta(minutes=minutes),
        party_count=party_count,
        status=status,
    )


class FixedClock:
    """Callable clock that tests can move."""

    def __init__(self, now: datetime = MORNING) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryFacilityDirectory:
    def __init__(self, *facilities: Facility) -> None:
        self.facilities = {f.id: f for f in facilities}

    def get_facility(self, facility_id: int) -> Optional[Facility]:
        return self.facilities.get(facility_id)


class InMemoryBookingStore:
    """Booking store that keeps rows in a list and checks capacity on insert."""

    def __init__(self, bookings: Optional[List[Booking]] = None) -> None:
        self.rows: List[Booking] = []
        self.insert_calls = 0
        for booking in bookings or []:
            self._append(booking)

    def _append(self, booking: Booking) -> Booking:
        stored = replace(booking, id=booking.id or len(self.rows) + 1)
        self.rows.append(stored)
        return replace(stored)

    def list_bookings(self, facility_id: int, target_date: date) -> List[Booking]:
        return [
            replace(b)
            for b in sorted(self.rows, key=lambda b: (b.starts_at, b.id))
            if b.facility_id == facility_id and b.starts_at.date() == target_date
        ]

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        for b in self.rows:
            if b.id == booking_id:
                return replace(b)
        return None

    def insert_booking(self, booking: Booking, capacity: int) -> Booking:
        self.insert_calls += 1
        taken = sum(
            b.party_count
            for b in self.rows
            if b.is_confirmed
            and b.facility_id == booking.facility_id
            and b.starts_at == booking.starts_at
            and b.ends_at == booking.ends_at
        )
        if taken + booking.party_count > capacity:
            raise BookingConflict("full")
        return self._append(booking)

    def update_booking_status(
        self,
        booking_id: int,
        status: BookingStatus,
        actor_id: str,
        at: datetime,
    ) -> Tuple[Booking, bool]:
        for i, b in enumerate(self.rows):
            if b.id == booking_id:
                if b.status == status:
                    return replace(b), False
                self.rows[i] = replace(b, status=status, cancelled_at=at, cancelled_by=actor_id)
                return replace(self.rows[i]), True
        raise BookingNotFound(booking_id)


class StaleReadBookingStore(InMemoryBookingStore):
    """Serves the first snapshot of each booking from get_booking, like a reader that lost a race."""

    def __init__(self, bookings: Optional[List[Booking]] = None) -> None:
        super().__init__(bookings)
        self._snapshots: Dict[int, Booking] = {}

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        if booking_id not in self._snapshots:
            current = super().get_booking(booking_id)
            if current is None:
                return None
            self._snapshots[booking_id] = current
        return replace(self._snapshots[booking_id])


class RecordingNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.events: List[Tuple[str, Booking]] = []
        self.fail = fail

    def booking_changed(self, event_type: str, booking: Booking) -> None:
        if self.fail:
            raise RuntimeError("channel down")
        self.events.append((event_type, booking))


class FakeRedis:
    """Records PUBLISH calls; optionally fails like an unreachable server."""

    def __init__(self, fail: bool = False, error: Optional[Exception] = None) -> None:
        self.published: List[Tuple[str, str]] = []
        self.error = error or (ConnectionError("redis unreachable") if fail else None)
        self.publish_calls = 0

    def publish(self, channel: str, message: str) -> int:
        self.publish_calls += 1
        if self.error is not None:
            raise self.error
        self.published.append((channel, message))
        return 1


class FakeAsyncPubSub:
    def __init__(
        self,
        messages: List[Optional[Dict[str, Any]]],
        drop_when_empty: bool = False,
    ) -> None:
        self.messages = list(messages)
        self.drop_when_empty = drop_when_empty
        self.subscribed: List[str] = []
        self.unsubscribed: List[str] = []
        self.closed = False

    async def subscribe(self, channel: str) -> None:
        self.subscribed.append(channel)

    async def get_message(self, ignore_subscribe_messages: bool = False, timeout: float = 0.0):
        if self.messages:
            return self.messages.pop(0)
        if self.drop_when_empty:
            raise ConnectionError("connection closed by server")
        return None

    async def unsubscribe(self, channel: str) -> None:
        self.unsubscribed.append(channel)

    async def aclose(self) -> None:
        self.closed = True


class FakeAsyncRedis:
    def __init__(self, pubsub: FakeAsyncPubSub) -> None:
        self._pubsub = pubsub
        self.closed = False

    def pubsub(self) -> FakeAsyncPubSub:
        return self._pubsub

    async def aclose(self) -> None:
        self.closed = True
