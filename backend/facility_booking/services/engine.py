# backend/facility_booking/services/engine.py
"""
Booking engine: the single entry point used by every view.

Each call reads the facility and the booking ledger afresh; nothing is
cached between calls.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime

from .collaborators import BookingStore, ChangeListener, CurrentUser, FacilityDirectory
from .errors import BookingConflict, FacilityNotFound, FacilityUnavailable
from .lifecycle import BookingLifecycle
from .slots.admission import AdmissionDecision, AdmissionResult, evaluate_admission
from .slots.calculator import SlotGrid, calculate_day_slots
from .slots.config import BookingConfig, get_booking_config
from .slots.occupancy import aggregate_occupancy, find_misaligned_bookings
from .slots.quota import QuotaState, compute_quota
from .slots.records import Booking, BookingRequest, Facility, Slot

logger = logging.getLogger(__name__)


class BookingEngine:
    def __init__(
        self,
        facilities: FacilityDirectory,
        store: BookingStore,
        notifier: ChangeListener | None = None,
        clock: Callable[[], datetime] = datetime.now,
        config: BookingConfig | None = None,
    ):
        self.facilities = facilities
        self.store = store
        self.clock = clock
        self.config = config or get_booking_config()
        self.lifecycle = BookingLifecycle(store, notifier, clock)

    # ── Reads ────────────────────────────────────────────────────────────

    def get_facility(self, facility_id: int) -> Facility:
        facility = self.facilities.get_facility(facility_id)
        if facility is None:
            raise FacilityNotFound(facility_id)
        return facility

    def get_grid(self, facility_id: int, target_date: date) -> SlotGrid:
        """Raises ConfigError for a malformed operating window."""
        return calculate_day_slots(self.get_facility(facility_id), target_date, self.config)

    def get_slots(self, facility_id: int, target_date: date) -> list[Slot]:
        return list(self.get_grid(facility_id, target_date))

    def get_occupancy(self, facility_id: int, target_date: date) -> dict[Slot, int]:
        occupancy, _ = self.get_occupancy_report(facility_id, target_date)
        return occupancy

    def get_occupancy_report(
        self, facility_id: int, target_date: date
    ) -> tuple[dict[Slot, int], list[Booking]]:
        """Occupancy per slot plus the confirmed bookings that fit no slot of the grid."""
        grid = self.get_grid(facility_id, target_date)
        bookings = self.store.list_bookings(facility_id, target_date)
        misaligned = find_misaligned_bookings(grid, bookings)
        return aggregate_occupancy(grid, bookings), misaligned

    def get_quota(self, user_id: str, facility_id: int, target_date: date) -> QuotaState:
        self.get_facility(facility_id)
        bookings = self.store.list_bookings(facility_id, target_date)
        return compute_quota(user_id, bookings, self.config.daily_cap_minutes)

    def list_bookings(self, facility_id: int, target_date: date) -> list[Booking]:
        self.get_facility(facility_id)
        return self.store.list_bookings(facility_id, target_date)

    # ── Transitions ──────────────────────────────────────────────────────

    def submit_booking(self, request: BookingRequest) -> AdmissionResult:
        """
        Admit and persist a booking request.

        Admission is evaluated against the ledger as read now, and the store
        re-checks capacity inside the insert. A store conflict is reported as
        REJECTED_CAPACITY_EXCEEDED.
        """
        facility = self.get_facility(request.facility_id)
        if not facility.enabled:
            raise FacilityUnavailable(facility.id)

        target_date = request.starts_at.date()
        grid = calculate_day_slots(facility, target_date, self.config)
        bookings = self.store.list_bookings(facility.id, target_date)

        result = evaluate_admission(
            request,
            facility,
            grid,
            bookings,
            now=self.clock(),
            daily_cap_minutes=self.config.daily_cap_minutes,
        )
        if not result.accepted:
            logger.info(
                f"Booking rejected ({result.decision.value}): facility={facility.id} "
                f"user={request.user_id} start={request.starts_at.isoformat()}"
            )
            return result

        try:
            booking = self.lifecycle.create(request, facility.capacity)
        except BookingConflict:
            return AdmissionResult(
                AdmissionDecision.REJECTED_CAPACITY_EXCEEDED,
                slot=result.slot,
                booked_count=result.booked_count,
                quota=result.quota,
            )

        return AdmissionResult(
            AdmissionDecision.ACCEPTED,
            slot=result.slot,
            booked_count=result.booked_count + booking.party_count,
            quota=QuotaState(
                user_id=request.user_id,
                daily_cap_minutes=result.quota.daily_cap_minutes,
                used_minutes=result.quota.used_minutes + booking.minutes,
            ),
            booking=booking,
        )

    def cancel_booking(self, booking_id: int, actor: CurrentUser) -> Booking:
        return self.lifecycle.cancel(booking_id, actor)
