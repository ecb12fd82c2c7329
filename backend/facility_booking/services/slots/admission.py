# backend/facility_booking/services/slots/admission.py
"""
Admission decision for a booking request.

Checks run in a fixed order and the first failure wins:

1. requested bounds are a slot of the grid   → REJECTED_NOT_A_SLOT
2. slot start is not before now              → REJECTED_PAST
3. booked + party count fits capacity        → REJECTED_CAPACITY_EXCEEDED
4. slot length fits the remaining quota      → REJECTED_QUOTA_EXCEEDED
5. ACCEPTED

Pure: callers pass freshly read bookings and the current time.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .calculator import SlotGrid
from .occupancy import booked_count
from .quota import QuotaState, compute_quota
from .records import Booking, BookingRequest, Facility, Slot


class AdmissionDecision(str, Enum):
    ACCEPTED = "accepted"
    REJECTED_NOT_A_SLOT = "rejected_not_a_slot"
    REJECTED_PAST = "rejected_past"
    REJECTED_CAPACITY_EXCEEDED = "rejected_capacity_exceeded"
    REJECTED_QUOTA_EXCEEDED = "rejected_quota_exceeded"


REJECTION_MESSAGES = {
    AdmissionDecision.REJECTED_NOT_A_SLOT: "Requested time does not match a bookable slot",
    AdmissionDecision.REJECTED_PAST: "Cannot book a slot in the past",
    AdmissionDecision.REJECTED_CAPACITY_EXCEEDED: "This time slot is already fully booked",
    AdmissionDecision.REJECTED_QUOTA_EXCEEDED: "Daily booking limit for this facility exceeded",
}


@dataclass(frozen=True)
class AdmissionResult:
    decision: AdmissionDecision
    slot: Slot | None = None
    booked_count: int = 0
    quota: QuotaState | None = None
    booking: Booking | None = None

    @property
    def accepted(self) -> bool:
        return self.decision == AdmissionDecision.ACCEPTED

    @property
    def message(self) -> str | None:
        return REJECTION_MESSAGES.get(self.decision)


def evaluate_admission(
    request: BookingRequest,
    facility: Facility,
    grid: SlotGrid,
    bookings: Sequence[Booking],
    now: datetime,
    daily_cap_minutes: int | None = None,
) -> AdmissionResult:
    """Decide whether `request` may be booked against the current ledger."""
    slot = grid.find(request.starts_at, request.ends_at)
    if slot is None:
        return AdmissionResult(AdmissionDecision.REJECTED_NOT_A_SLOT)

    if slot.start < now:
        return AdmissionResult(AdmissionDecision.REJECTED_PAST, slot=slot)

    booked = booked_count(slot, bookings)
    if booked + request.party_count > facility.capacity:
        return AdmissionResult(
            AdmissionDecision.REJECTED_CAPACITY_EXCEEDED,
            slot=slot,
            booked_count=booked,
        )

    quota = compute_quota(request.user_id, bookings, daily_cap_minutes)
    if slot.minutes > quota.remaining_minutes:
        return AdmissionResult(
            AdmissionDecision.REJECTED_QUOTA_EXCEEDED,
            slot=slot,
            booked_count=booked,
            quota=quota,
        )

    return AdmissionResult(
        AdmissionDecision.ACCEPTED,
        slot=slot,
        booked_count=booked,
        quota=quota,
    )
