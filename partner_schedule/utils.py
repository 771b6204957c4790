"""Shared time-of-day utilities used across the scheduling core.

Times are ``HH:MM`` 24-hour strings. Zero padding keeps lexicographic
order equal to chronological order, so blocks can be compared as plain
strings. ``24:00`` is accepted as the end-of-day boundary.
"""

import math
import re
from datetime import date, datetime, time, timedelta

from partner_schedule.config import MINUTES_PER_DAY, settings
from partner_schedule.errors import InvalidFormatError

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})$")
END_OF_DAY = "24:00"


def parse_time(value: str, allow_overflow: bool = False) -> int:
    """Convert ``HH:MM`` to minutes since midnight.

    With ``allow_overflow`` an end time that runs past midnight, as built
    by ``slot_end_time``, is accepted up to ``47:59``.

    Examples:
        >>> parse_time("09:30")
        570
        >>> parse_time("24:00")
        1440
    """
    if not isinstance(value, str):
        raise InvalidFormatError(f"Expected an HH:MM string, got {value!r}")
    match = _TIME_RE.match(value.strip())
    if not match:
        raise InvalidFormatError(f"Invalid time {value!r}: expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours == 24 and minutes == 0:
        return MINUTES_PER_DAY
    max_hours = 47 if allow_overflow else 23
    if hours > max_hours or minutes > 59:
        raise InvalidFormatError(f"Invalid time {value!r}: out of range")
    return hours * 60 + minutes


def format_minutes(total: int) -> str:
    """Format minutes since midnight as ``HH:MM`` without wrapping."""
    return f"{total // 60:02d}:{total % 60:02d}"


def snap_minutes(total: float, grid: int) -> int:
    """Round to the nearest multiple of ``grid`` and clamp to the day."""
    # Half-up rounding: 15 minutes on a 30-minute grid snaps forward.
    snapped = math.floor(total / grid + 0.5) * grid
    return max(0, min(MINUTES_PER_DAY, snapped))


def to_fraction(value: str) -> float:
    """Position of a time within the day, from 0.0 (midnight) towards 1.0.

    ``24:00`` maps to ``1.0``, the bottom edge of the day column; every
    other valid time is below it.
    """
    return parse_time(value) / MINUTES_PER_DAY


def from_fraction(fraction: float, grid: int = settings.schedule.grid_minutes) -> str:
    """Snap a fractional day position to the grid and format it.

    ``1.0`` maps to ``24:00``; blocks never cross midnight.
    """
    return format_minutes(snap_minutes(fraction * MINUTES_PER_DAY, grid))


def add_minutes(value: str, minutes: int, allow_overflow: bool = False) -> str:
    """Shift a time by ``minutes``.

    The result wraps within the day unless ``allow_overflow`` is set, in
    which case hours past 24 are kept so an end time derived from a late
    start plus a service duration stays after its start.
    """
    total = parse_time(value, allow_overflow=allow_overflow) + minutes
    if allow_overflow:
        if total < 0:
            raise InvalidFormatError(f"{value} {minutes:+d} minutes is before midnight")
        if total >= 2 * MINUTES_PER_DAY:
            raise InvalidFormatError(f"{value} {minutes:+d} minutes runs past the next day")
        return format_minutes(total)
    return format_minutes(total % MINUTES_PER_DAY)


def slot_end_time(start: str, duration_minutes: int) -> str:
    """End time of a job starting at ``start`` and lasting ``duration_minutes``."""
    return add_minutes(start, duration_minutes, allow_overflow=True)


def is_aligned(value: str, grid: int = settings.schedule.grid_minutes) -> bool:
    return parse_time(value) % grid == 0


def day_of_week(day: date) -> int:
    """Weekday index with 0 = Sunday, matching stored schedules."""
    return (day.weekday() + 1) % 7


def combine(day: date, value: str, tzinfo=None) -> datetime:
    """Build a datetime for ``value`` on ``day``.

    ``24:00`` becomes next midnight and overflow end times such as ``25:00``
    land on the following day.
    """
    total = parse_time(value, allow_overflow=True)
    return datetime.combine(day, time(0, 0), tzinfo=tzinfo) + timedelta(minutes=total)


def format_time_display(value: str) -> str:
    """Short 24-hour label such as ``9:00`` or ``24:00``."""
    total = parse_time(value)
    return f"{total // 60}:{total % 60:02d}"
