"""
Weekly availability model: seven interval sets plus booking-window settings.

Every function returns a new WeeklyAvailability; only the day being
edited changes, the other six are carried over as-is. The whole document
is what gets saved, never a single day.
"""

import logging
from datetime import date
from enum import Enum
from typing import Optional

from partner_schedule.config import settings
from partner_schedule.errors import InvariantViolationError
from partner_schedule.schemas.availability_schema import (
    DAY_NAMES,
    DayAvailability,
    TimeBlock,
    WeeklyAvailability,
)
from partner_schedule.schemas.booking_schema import BookingSlot
from partner_schedule.schedule.intervals import canonical_violations, contains, insert, remove
from partner_schedule.utils import day_of_week, is_aligned

logger = logging.getLogger(__name__)

SUNDAY = 0
SATURDAY = 6


class EditOp(str, Enum):
    INSERT = "insert"
    REMOVE = "remove"


def _default_blocks(day: int) -> tuple[TimeBlock, ...]:
    if day == SUNDAY:
        return ()
    if day == SATURDAY:
        return (TimeBlock(start="09:00", end="14:00"),)
    return (TimeBlock(start="08:00", end="18:00"),)


def default_weekly_availability(partner_id: str) -> WeeklyAvailability:
    """Schedule used for partners that have not saved one: Sunday off,
    weekdays 08:00-18:00, Saturday 09:00-14:00."""
    days = tuple(
        DayAvailability(
            day_of_week=index,
            day_name=name,
            is_enabled=index != SUNDAY,
            blocks=_default_blocks(index),
        )
        for index, name in enumerate(DAY_NAMES)
    )
    return WeeklyAvailability(
        partner_id=partner_id,
        days=days,
        buffer_time_minutes=settings.schedule.default_buffer_minutes,
        max_advance_booking_days=settings.schedule.default_max_advance_days,
    )


def get_day(weekly: WeeklyAvailability, day: int) -> DayAvailability:
    for entry in weekly.days:
        if entry.day_of_week == day:
            return entry
    raise KeyError(f"Day {day} not present for partner {weekly.partner_id}")


def _replace_day(weekly: WeeklyAvailability, updated: DayAvailability) -> WeeklyAvailability:
    days = tuple(updated if d.day_of_week == updated.day_of_week else d for d in weekly.days)
    return weekly.model_copy(update={"days": days})


def set_day_enabled(weekly: WeeklyAvailability, day: int, enabled: bool) -> WeeklyAvailability:
    """Toggle a day on or off. Its blocks are kept either way."""
    current = get_day(weekly, day)
    logger.debug("Day %s enabled=%s", current.day_name, enabled)
    return _replace_day(weekly, current.model_copy(update={"is_enabled": enabled}))


def edit_day_blocks(
    weekly: WeeklyAvailability, day: int, op: EditOp, span: TimeBlock
) -> WeeklyAvailability:
    """
    Insert or remove ``span`` on one day.

    Raises:
        EmptyIntervalError: If ``span`` has start >= end.
        KeyError: If ``day`` is not in the schedule.
    """
    current = get_day(weekly, day)
    if op == EditOp.INSERT:
        blocks = insert(current.blocks, span)
    else:
        blocks = remove(current.blocks, span)
    return _replace_day(weekly, current.model_copy(update={"blocks": blocks}))


def set_day_blocks(
    weekly: WeeklyAvailability, day: int, blocks: tuple[TimeBlock, ...]
) -> WeeklyAvailability:
    """Replace a day's blocks with an already computed canonical set."""
    current = get_day(weekly, day)
    violations = canonical_violations(blocks)
    if violations:
        raise InvariantViolationError(
            f"Blocks for {current.day_name} are not canonical", violations
        )
    return _replace_day(weekly, current.model_copy(update={"blocks": tuple(blocks)}))


def validate(weekly: WeeklyAvailability, grid: Optional[int] = None) -> list[str]:
    """Return every invariant violation; an empty list means the document is valid.

    ``grid`` additionally checks that block boundaries sit on the grid.
    """
    violations: list[str] = []

    seen = [d.day_of_week for d in weekly.days]
    if sorted(seen) != list(range(7)):
        violations.append(f"schedule must hold each weekday exactly once, got {seen}")

    for day in weekly.days:
        violations.extend(f"{day.day_name}: {v}" for v in canonical_violations(day.blocks))
        if grid:
            for block in day.blocks:
                for boundary in (block.start, block.end):
                    try:
                        aligned = is_aligned(boundary, grid)
                    except ValueError:
                        continue
                    if not aligned:
                        violations.append(
                            f"{day.day_name}: {boundary} is not on the {grid}-minute grid"
                        )

    if weekly.buffer_time_minutes < 0:
        violations.append(f"buffer_time_minutes must be >= 0, got {weekly.buffer_time_minutes}")
    if weekly.max_advance_booking_days <= 0:
        violations.append(
            f"max_advance_booking_days must be > 0, got {weekly.max_advance_booking_days}"
        )
    return violations


def assert_valid(weekly: WeeklyAvailability, grid: Optional[int] = None) -> None:
    """Raise InvariantViolationError if ``validate`` finds anything."""
    violations = validate(weekly, grid)
    if violations:
        logger.warning(
            "Availability for %s failed validation: %s", weekly.partner_id, violations
        )
        raise InvariantViolationError(
            f"Availability for {weekly.partner_id} is invalid: {'; '.join(violations)}",
            violations,
        )


def active_days(weekly: WeeklyAvailability) -> int:
    return sum(1 for d in weekly.days if d.is_enabled)


def is_within_availability(weekly: WeeklyAvailability, slot: BookingSlot) -> bool:
    """True if the slot's weekday is enabled and one block covers the whole slot."""
    day = get_day(weekly, day_of_week(slot.date))
    if not day.is_enabled:
        return False
    return contains(day.blocks, slot.start_time, slot.end_time)


def is_within_booking_window(weekly: WeeklyAvailability, slot_date: date, today: date) -> bool:
    """True if ``slot_date`` is between today and the furthest bookable day."""
    offset = (slot_date - today).days
    return 0 <= offset <= weekly.max_advance_booking_days
