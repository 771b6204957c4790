"""
Interval set over one day's open hours.

A day's blocks are kept in canonical form: sorted by start, pairwise
disjoint, and never touching (``09:00-12:00`` and ``12:00-15:00`` are
always stored as ``09:00-15:00``). ``insert`` and ``remove`` are pure:
they take a sequence of blocks and return a new tuple, leaving the input
untouched.

Usage:
    blocks = insert((), make_block("09:00", "12:00"))
    blocks = insert(blocks, make_block("12:00", "15:00"))   # one block 09:00-15:00
    blocks = remove(blocks, make_block("10:00", "11:00"))   # 09:00-10:00, 11:00-15:00
"""

import logging
from typing import Iterable

from partner_schedule.errors import EmptyIntervalError
from partner_schedule.schemas.availability_schema import TimeBlock
from partner_schedule.utils import parse_time

logger = logging.getLogger(__name__)


def make_block(start: str, end: str) -> TimeBlock:
    """Build a block, rejecting malformed times and empty spans."""
    if parse_time(start) >= parse_time(end):
        raise EmptyIntervalError(f"Empty interval: start {start} is not before end {end}")
    return TimeBlock(start=start, end=end)


def _check_not_empty(block: TimeBlock) -> None:
    if parse_time(block.start) >= parse_time(block.end):
        raise EmptyIntervalError(
            f"Empty interval: start {block.start} is not before end {block.end}"
        )


def insert(blocks: Iterable[TimeBlock], new_block: TimeBlock) -> tuple[TimeBlock, ...]:
    """
    Add a block and merge anything it overlaps or touches.

    All blocks are sorted by start and swept once left to right; a block
    whose start is at or before the previous end is folded into it.

    Raises:
        EmptyIntervalError: If ``new_block`` has start >= end.
    """
    _check_not_empty(new_block)
    ordered = sorted([*blocks, new_block], key=lambda b: b.start)

    merged: list[TimeBlock] = [ordered[0]]
    for block in ordered[1:]:
        last = merged[-1]
        if block.start <= last.end:
            if block.end > last.end:
                merged[-1] = TimeBlock(start=last.start, end=block.end)
        else:
            merged.append(block)

    logger.debug("Inserted %s -> %s", new_block, [str(b) for b in merged])
    return tuple(merged)


def remove(blocks: Iterable[TimeBlock], span: TimeBlock) -> tuple[TimeBlock, ...]:
    """
    Subtract ``span`` from every block.

    A block the span misses is kept, a fully covered block is dropped, and
    a block the span cuts is replaced by its non-empty remainders. Splits
    never create adjacency, so no re-merge is needed.
    """
    _check_not_empty(span)
    result: list[TimeBlock] = []
    for block in blocks:
        if span.start >= block.end or span.end <= block.start:
            result.append(block)
            continue
        if block.start < span.start:
            result.append(TimeBlock(start=block.start, end=span.start))
        if block.end > span.end:
            result.append(TimeBlock(start=span.end, end=block.end))

    logger.debug("Removed %s -> %s", span, [str(b) for b in result])
    return tuple(result)


def remove_at(blocks: Iterable[TimeBlock], point: str) -> tuple[TimeBlock, ...]:
    """Drop the whole block containing ``point``; no-op if none does."""
    parse_time(point)
    return tuple(b for b in blocks if not (b.start <= point < b.end))


def contains(blocks: Iterable[TimeBlock], start: str, end: str) -> bool:
    """True if ``start``-``end`` lies entirely inside a single block."""
    return any(b.start <= start and end <= b.end for b in blocks)


def canonical_violations(blocks: Iterable[TimeBlock]) -> list[str]:
    """List every way ``blocks`` departs from canonical form."""
    violations: list[str] = []
    previous = None
    for block in blocks:
        try:
            if parse_time(block.start) >= parse_time(block.end):
                violations.append(f"block {block} is empty")
        except ValueError as exc:
            violations.append(f"block {block} is malformed: {exc}")
            previous = block
            continue
        if previous is not None:
            if block.start < previous.start:
                violations.append(f"block {block} is not sorted after {previous}")
            elif block.start < previous.end:
                violations.append(f"block {block} overlaps {previous}")
            elif block.start == previous.end:
                violations.append(f"block {block} touches {previous}")
        previous = block
    return violations
