# backend/facility_booking/services/errors.py
"""
Error kinds raised by the booking engine.

Admission rejections are NOT here: they are returned as values
(see services/slots/admission.py).
"""

from enum import Enum


class ConfigErrorReason(str, Enum):
    INVALID_FORMAT = "invalid_format"
    INVALID_TIME = "invalid_time"
    NON_POSITIVE_WINDOW = "non_positive_window"


class BookingError(Exception):
    """Base class for recoverable engine errors."""


class ConfigError(BookingError):
    """Facility configuration cannot produce a slot grid."""

    def __init__(self, reason: ConfigErrorReason, value: str | None = None):
        self.reason = reason
        self.value = value
        super().__init__(f"{reason.value}: {value!r}")


class FacilityNotFound(BookingError):
    def __init__(self, facility_id: int):
        self.facility_id = facility_id
        super().__init__(f"Facility {facility_id} not found")


class FacilityUnavailable(BookingError):
    """Facility exists but is disabled for booking."""

    def __init__(self, facility_id: int):
        self.facility_id = facility_id
        super().__init__(f"Facility {facility_id} is not enabled")


class BookingNotFound(BookingError):
    def __init__(self, booking_id: int):
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} not found")


class BookingForbidden(BookingError):
    def __init__(self, booking_id: int, user_id: str):
        self.booking_id = booking_id
        self.user_id = user_id
        super().__init__(f"User {user_id} may not modify booking {booking_id}")


class BookingConflict(BookingError):
    """Store refused an insert because the slot filled up concurrently."""
