# backend/facility_booking/services/slots/config.py
"""
Booking configuration for slot, occupancy and quota calculation.
"""

from dataclasses import dataclass
from functools import lru_cache

from ...config import settings


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the booking engine.

    Attributes:
        daily_cap_minutes: Booking minutes a resident may hold per facility per day
        default_slot_minutes: Slot length used when a facility leaves it unset
        default_capacity: Simultaneous occupants per slot when a facility leaves it unset
    """
    daily_cap_minutes: int = 180
    default_slot_minutes: int = 60
    default_capacity: int = 10

    def __post_init__(self):
        """Validate configuration."""
        if self.daily_cap_minutes < 0:
            raise ValueError(f"daily_cap_minutes must be >= 0, got {self.daily_cap_minutes}")
        if self.default_slot_minutes <= 0:
            raise ValueError(f"default_slot_minutes must be positive, got {self.default_slot_minutes}")
        if self.default_capacity <= 0:
            raise ValueError(f"default_capacity must be positive, got {self.default_capacity}")

    def resolve_slot_minutes(self, slot_minutes: int | None) -> int:
        """Slot length for a facility; unset or non-positive falls back to the default."""
        if slot_minutes is None or slot_minutes <= 0:
            return self.default_slot_minutes
        return slot_minutes

    def resolve_capacity(self, capacity: int | None) -> int:
        if capacity is None:
            return self.default_capacity
        return capacity


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton) from application settings."""
    return BookingConfig(
        daily_cap_minutes=settings.daily_cap_minutes,
        default_slot_minutes=settings.default_slot_minutes,
        default_capacity=settings.default_capacity,
    )

