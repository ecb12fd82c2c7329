# backend/facility_booking/services/slots/__init__.py
"""
Slot, occupancy, quota and admission calculation.

All functions here are pure: they take a facility, a date, the booking
ledger and "now", and touch no storage.
"""

from .config import BookingConfig, get_booking_config
from .window import OperatingWindow, parse_operating_window
from .calculator import SlotGrid, calculate_day_slots, iter_slots
from .occupancy import aggregate_occupancy, booked_count, find_misaligned_bookings
from .quota import QuotaState, compute_quota
from .admission import AdmissionDecision, AdmissionResult, evaluate_admission
from .records import Booking, BookingRequest, BookingStatus, Facility, Slot

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "OperatingWindow",
    "parse_operating_window",
    "SlotGrid",
    "calculate_day_slots",
    "iter_slots",
    "aggregate_occupancy",
    "booked_count",
    "find_misaligned_bookings",
    "QuotaState",
    "compute_quota",
    "AdmissionDecision",
    "AdmissionResult",
    "evaluate_admission",
    "Booking",
    "BookingRequest",
    "BookingStatus",
    "Facility",
    "Slot",
]
