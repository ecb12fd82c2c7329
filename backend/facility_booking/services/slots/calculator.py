# backend/facility_booking/services/slots/calculator.py
"""
Slot grid calculation.

Produces the ordered, contiguous, non-overlapping slots of a facility's
operating window for one date. A trailing slot that would end after the
window closes is dropped, never shortened.

Contains:
✓ operating window of the facility
✓ slot length (unset / non-positive → default)

Does NOT contain:
✗ Bookings (see occupancy.py)
✗ "now" (past slots are still part of the grid; admission rejects them)
"""

from collections.abc import Iterator
from datetime import date, timedelta

from .config import BookingConfig, get_booking_config
from .records import Facility, Slot
from .window import OperatingWindow, parse_operating_window


def iter_slots(window: OperatingWindow, slot_minutes: int | None) -> Iterator[Slot]:
    """Lazily yield slots of slot_minutes starting at window.open."""
    step = timedelta(minutes=get_booking_config().resolve_slot_minutes(slot_minutes))

    start = window.open
    while start + step <= window.close:
        yield Slot(start=start, end=start + step)
        start += step


class SlotGrid:
    """
    Restartable slot sequence for one window.

    Every iteration walks the window again, so the same instance can be
    consumed by occupancy aggregation and admission without materialising it.
    """

    def __init__(self, window: OperatingWindow, slot_minutes: int | None):
        self.window = window
        self.slot_minutes = get_booking_config().resolve_slot_minutes(slot_minutes)

    def __iter__(self) -> Iterator[Slot]:
        return iter_slots(self.window, self.slot_minutes)

    def __len__(self) -> int:
        return self.window.minutes // self.slot_minutes

    def __contains__(self, slot: object) -> bool:
        if not isinstance(slot, Slot):
            return False
        return self.find(slot.start, slot.end) is not None

    def find(self, start, end) -> Slot | None:
        """Return the grid slot with exactly these bounds, if any."""
        offset = start - self.window.open
        step = timedelta(minutes=self.slot_minutes)
        if offset < timedelta(0) or offset % step:
            return None
        if end - start != step or end > self.window.close:
            return None
        return Slot(start=start, end=end)


def calculate_day_slots(
    facility: Facility,
    target_date: date,
    config: BookingConfig | None = None,
) -> SlotGrid:
    """
    Calculate the slot grid for a facility on a date.

    Raises ConfigError when the operating window cannot be parsed; a valid
    window too short for one slot gives an empty grid.
    """
    config = config or get_booking_config()
    window = parse_operating_window(facility.operating_window, target_date)
    return SlotGrid(window, config.resolve_slot_minutes(facility.slot_minutes))
