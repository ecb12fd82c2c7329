# backend/facility_booking/services/slots/occupancy.py
"""
Per-slot occupancy from the booking ledger.

A confirmed booking counts against a slot only when its bounds equal the
slot's bounds exactly. Bookings that align with no slot of the current grid
(e.g. made before the facility's hours or slot length changed) are never
folded into a neighbouring slot; they are reported by
`find_misaligned_bookings` instead.
"""

import logging
from collections.abc import Iterable

from .records import Booking, Slot

logger = logging.getLogger(__name__)


def aggregate_occupancy(
    slots: Iterable[Slot],
    bookings: Iterable[Booking],
) -> dict[Slot, int]:
    """Map every slot to the party count of confirmed bookings on it (default 0)."""
    occupancy: dict[Slot, int] = {slot: 0 for slot in slots}

    for booking in bookings:
        if not booking.is_confirmed:
            continue
        key = Slot(start=booking.starts_at, end=booking.ends_at)
        if key in occupancy:
            occupancy[key] += booking.party_count

    return occupancy


def booked_count(slot: Slot, bookings: Iterable[Booking]) -> int:
    """Confirmed party count on a single slot."""
    return sum(
        b.party_count
        for b in bookings
        if b.is_confirmed and slot.matches(b.starts_at, b.ends_at)
    )


def find_misaligned_bookings(
    slots: Iterable[Slot],
    bookings: Iterable[Booking],
) -> list[Booking]:
    """Confirmed bookings whose bounds match no slot of the grid."""
    grid = set(slots)
    misaligned = [
        b for b in bookings
        if b.is_confirmed and Slot(start=b.starts_at, end=b.ends_at) not in grid
    ]
    for b in misaligned:
        logger.warning(
            f"Booking {b.id} on facility {b.facility_id} "
            f"({b.starts_at.isoformat()}–{b.ends_at.isoformat()}) matches no current slot"
        )
    return misaligned
