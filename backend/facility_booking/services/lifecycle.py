# backend/facility_booking/services/lifecycle.py
"""
Booking state transitions: create (→ confirmed) and cancel (→ cancelled).

Occupancy and quota are not touched here; they are recomputed from the
ledger on the next read, so a cancellation frees capacity and minutes at once.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from .collaborators import BookingStore, ChangeListener, CurrentUser
from .errors import BookingForbidden, BookingNotFound
from .events import BOOKING_CANCELLED, BOOKING_CREATED
from .slots.records import Booking, BookingRequest, BookingStatus

logger = logging.getLogger(__name__)


class BookingLifecycle:
    def __init__(
        self,
        store: BookingStore,
        notifier: ChangeListener | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.notifier = notifier
        self.clock = clock

    def create(self, request: BookingRequest, capacity: int) -> Booking:
        """
        Persist an admitted request as a confirmed booking.

        Raises BookingConflict when the store's capacity re-check fails.
        """
        booking = Booking(
            facility_id=request.facility_id,
            user_id=request.user_id,
            starts_at=request.starts_at,
            ends_at=request.ends_at,
            party_count=request.party_count,
            note=request.note,
            status=BookingStatus.CONFIRMED,
            created_at=self.clock(),
        )
        created = self.store.insert_booking(booking, capacity)
        logger.info(
            f"Booking {created.id} created: facility={created.facility_id} "
            f"user={created.user_id} start={created.starts_at.isoformat()} party={created.party_count}"
        )
        self._notify(BOOKING_CREATED, created)
        return created

    def cancel(self, booking_id: int, actor: CurrentUser) -> Booking:
        """
        Cancel a booking on behalf of its owner or an operator.

        Cancelling an already cancelled booking returns it unchanged. Only the
        call whose update actually flips the status emits an event, so racing
        cancels leave one audit record and one notification.
        """
        booking = self.store.get_booking(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)

        if booking.user_id != actor.id and not actor.is_operator:
            raise BookingForbidden(booking_id, actor.id)

        if booking.status == BookingStatus.CANCELLED:
            return booking

        cancelled, changed = self.store.update_booking_status(
            booking_id,
            BookingStatus.CANCELLED,
            actor_id=actor.id,
            at=self.clock(),
        )
        if not changed:
            logger.info(f"Booking {booking_id} was already cancelled by {cancelled.cancelled_by}")
            return cancelled

        logger.info(f"Booking {booking_id} cancelled by {actor.id} ({actor.role})")
        self._notify(BOOKING_CANCELLED, cancelled)
        return cancelled

    def _notify(self, event_type: str, booking: Booking) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.booking_changed(event_type, booking)
        except Exception:
            logger.exception(f"Change listener failed for {event_type} on booking {booking.id}")
