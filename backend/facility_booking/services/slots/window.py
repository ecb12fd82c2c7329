# backend/facility_booking/services/slots/window.py
"""
Operating window parsing.

A facility describes its opening hours as "HH:MM-HH:MM" (24h, zero padded).
Combined with a calendar date this gives the [open, close) window that the
slot calculator walks.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time

from ..errors import ConfigError, ConfigErrorReason

# Whitespace around the dash is tolerated; nothing else is.
_WINDOW_RE = re.compile(r"^([0-9]{2}):([0-9]{2})\s*-\s*([0-9]{2}):([0-9]{2})$", re.ASCII)


@dataclass(frozen=True)
class OperatingWindow:
    open: datetime
    close: datetime

    @property
    def minutes(self) -> int:
        return int((self.close - self.open).total_seconds() // 60)


def parse_operating_window(value: str | None, target_date: date) -> OperatingWindow:
    """
    Parse "HH:MM-HH:MM" into window boundaries on target_date.

    Raises:
        ConfigError(INVALID_FORMAT): value does not look like "HH:MM-HH:MM"
        ConfigError(INVALID_TIME): hour or minute out of range
        ConfigError(NON_POSITIVE_WINDOW): close is not after open
    """
    if not isinstance(value, str):
        raise ConfigError(ConfigErrorReason.INVALID_FORMAT, value)

    match = _WINDOW_RE.match(value.strip())
    if not match:
        raise ConfigError(ConfigErrorReason.INVALID_FORMAT, value)

    open_h, open_m, close_h, close_m = (int(g) for g in match.groups())
    open_t = _to_time(open_h, open_m, value)
    close_t = _to_time(close_h, close_m, value)

    window_open = datetime.combine(target_date, open_t)
    window_close = datetime.combine(target_date, close_t)

    if window_close <= window_open:
        raise ConfigError(ConfigErrorReason.NON_POSITIVE_WINDOW, value)

    return OperatingWindow(open=window_open, close=window_close)


def _to_time(hour: int, minute: int, raw: str) -> time:
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ConfigError(ConfigErrorReason.INVALID_TIME, raw)
    return time(hour, minute)
