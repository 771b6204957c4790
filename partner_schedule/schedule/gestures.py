"""Translate a vertical drag over a day column into interval operations.

Pointer capture stays in the UI; this adapter only receives the two
fractional positions (0.0 = midnight, 1.0 = end of day) and whether the
drag began on an existing block.
"""

import logging
from typing import Iterable

from partner_schedule.config import settings
from partner_schedule.schemas.availability_schema import TimeBlock
from partner_schedule.schedule.intervals import insert, remove, remove_at
from partner_schedule.utils import from_fraction

logger = logging.getLogger(__name__)


def apply_drag(
    blocks: Iterable[TimeBlock],
    start_fraction: float,
    end_fraction: float,
    remove_mode: bool,
    grid: int = settings.schedule.grid_minutes,
    threshold_pct: float = settings.schedule.point_query_threshold_pct,
) -> tuple[TimeBlock, ...]:
    """
    Apply a finished drag to a day's blocks.

    A drag shorter than ``threshold_pct`` percent of the day is a click:
    in remove mode it deletes the block under the midpoint, otherwise it
    does nothing. A longer drag snaps both ends to the grid and inserts or
    removes the resulting range; a range that snaps to nothing is ignored.
    """
    current = tuple(blocks)
    top = max(0.0, min(1.0, min(start_fraction, end_fraction)))
    bottom = max(0.0, min(1.0, max(start_fraction, end_fraction)))

    if (bottom - top) * 100 < threshold_pct:
        if not remove_mode:
            return current
        point = from_fraction((top + bottom) / 2, grid)
        logger.debug("Click at %s treated as point removal", point)
        return remove_at(current, point)

    start, end = from_fraction(top, grid), from_fraction(bottom, grid)
    if start == end:
        return current

    span = TimeBlock(start=start, end=end)
    return remove(current, span) if remove_mode else insert(current, span)
