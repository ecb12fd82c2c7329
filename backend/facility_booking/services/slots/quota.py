# backend/facility_booking/services/slots/quota.py
"""
Daily booking-minutes budget of a resident on one facility.

Always derived from the booking ledger; never stored.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from .config import get_booking_config
from .records import Booking


@dataclass(frozen=True)
class QuotaState:
    user_id: str
    daily_cap_minutes: int
    used_minutes: int

    @property
    def remaining_minutes(self) -> int:
        return max(0, self.daily_cap_minutes - self.used_minutes)

    def remaining_breakdown(self) -> tuple[int, int]:
        """Remaining allowance as (hours, minutes) for display."""
        return divmod(self.remaining_minutes, 60)


def compute_quota(
    user_id: str,
    bookings: Iterable[Booking],
    daily_cap_minutes: int | None = None,
) -> QuotaState:
    """
    Sum the resident's confirmed minutes in `bookings`.

    `bookings` is the full ledger for one facility and date; other residents'
    bookings and cancelled ones are ignored.
    """
    if daily_cap_minutes is None:
        daily_cap_minutes = get_booking_config().daily_cap_minutes

    used = sum(
        b.minutes
        for b in bookings
        if b.user_id == user_id and b.is_confirmed
    )
    return QuotaState(
        user_id=user_id,
        daily_cap_minutes=daily_cap_minutes,
        used_minutes=used,
    )
