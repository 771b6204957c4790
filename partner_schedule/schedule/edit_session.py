"""
Editing session for a partner's schedule and capacity.

Holds the documents being edited and the last versions known to be saved.
"Unsaved changes" is a structural comparison between the two, never a
flag that can drift. Saving sends both whole documents concurrently; the
pair is not atomic, so if either call fails the session stays dirty and
the next save re-sends both.

Usage:
    session = await ScheduleEditSession.load("partner-1")
    session.edit_day_blocks(1, EditOp.INSERT, make_block("19:00", "21:00"))
    session.set_buffer_time(20)
    await session.save()
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional

from partner_schedule.config import settings
from partner_schedule.errors import ExternalServiceError, InvariantViolationError
from partner_schedule.logging_context import get_partner_logger, set_partner_id
from partner_schedule.schemas.availability_schema import TimeBlock, WeeklyAvailability
from partner_schedule.schemas.capacity_schema import PartnerCapacity, ServiceCategory
from partner_schedule.schedule import availability as availability_model
from partner_schedule.schedule import capacity as capacity_model
from partner_schedule.schedule.availability import EditOp
from partner_schedule.schedule.gestures import apply_drag
from partner_schedule.tools import availability as availability_service
from partner_schedule.tools import capacity as capacity_service

logger = get_partner_logger(__name__)


@dataclass
class ScheduleEditSession:
    """
    Caller-owned editing state for one partner.

    Each edit replaces ``availability`` or ``capacity`` with a new value;
    a rejected edit raises and leaves both untouched.
    """

    availability: WeeklyAvailability
    capacity: PartnerCapacity
    saved_availability: Optional[WeeklyAvailability] = None
    saved_capacity: Optional[PartnerCapacity] = None
    grid_minutes: int = field(default=settings.schedule.grid_minutes)

    def __post_init__(self) -> None:
        if self.availability.partner_id != self.capacity.partner_id:
            raise ValueError(
                f"Availability ({self.availability.partner_id}) and capacity "
                f"({self.capacity.partner_id}) belong to different partners"
            )

    @property
    def partner_id(self) -> str:
        return self.availability.partner_id

    @classmethod
    async def load(cls, partner_id: str) -> "ScheduleEditSession":
        """Fetch both documents, falling back to defaults for missing ones."""
        set_partner_id(partner_id)
        availability, capacity = await asyncio.gather(
            availability_service.get_weekly_availability(partner_id),
            capacity_service.get_partner_capacity(partner_id),
        )
        if availability is None:
            logger.info("No saved availability for %s; using defaults", partner_id)
            availability = availability_model.default_weekly_availability(partner_id)
            saved_availability = None
        else:
            saved_availability = availability
        if capacity is None:
            logger.info("No saved capacity for %s; using defaults", partner_id)
            capacity = capacity_model.default_partner_capacity(partner_id)
            saved_capacity = None
        else:
            saved_capacity = capacity
        return cls(
            availability=availability,
            capacity=capacity,
            saved_availability=saved_availability,
            saved_capacity=saved_capacity,
        )

    # --- Dirty tracking ---

    @property
    def has_unsaved_changes(self) -> bool:
        return (
            self.availability != self.saved_availability
            or self.capacity != self.saved_capacity
        )

    # --- Schedule edits ---

    def set_day_enabled(self, day: int, enabled: bool) -> None:
        self.availability = availability_model.set_day_enabled(self.availability, day, enabled)

    def edit_day_blocks(self, day: int, op: EditOp, span: TimeBlock) -> None:
        self.availability = availability_model.edit_day_blocks(self.availability, day, op, span)

    def apply_drag(self, day: int, start_fraction: float, end_fraction: float, remove_mode: bool) -> None:
        """Apply a finished drag gesture to one day's column."""
        current = availability_model.get_day(self.availability, day)
        if not current.is_enabled:
            logger.debug("Ignoring drag on disabled day %s", current.day_name)
            return
        blocks = apply_drag(
            current.blocks, start_fraction, end_fraction, remove_mode, grid=self.grid_minutes
        )
        self.availability = availability_model.set_day_blocks(self.availability, day, blocks)

    # --- Capacity edits ---

    def set_capacity(self, category: ServiceCategory, bays: int) -> None:
        self.capacity = capacity_model.set_capacity(self.capacity, category, bays)

    def set_buffer_time(self, minutes: int) -> None:
        """Set the buffer on both documents so they cannot disagree."""
        capacity = capacity_model.set_buffer_time(self.capacity, minutes)
        self.availability = self.availability.model_copy(update={"buffer_time_minutes": minutes})
        self.capacity = capacity

    # --- Summary ---

    @property
    def total_bays(self) -> int:
        return capacity_model.total_bays(self.capacity)

    @property
    def active_days(self) -> int:
        return availability_model.active_days(self.availability)

    # --- Persistence ---

    async def save(self) -> None:
        """
        Send both documents concurrently.

        Raises:
            InvariantViolationError: If a document is invalid; nothing is sent.
            ExternalServiceError: If either call fails. Neither snapshot is
                advanced, so the session still reports unsaved changes.
        """
        set_partner_id(self.partner_id)
        availability_model.assert_valid(self.availability)
        capacity_violations = capacity_model.validate(self.capacity)
        if capacity_violations:
            raise InvariantViolationError(
                f"Capacity for {self.partner_id} is invalid", capacity_violations
            )
        availability, capacity = self.availability, self.capacity

        results = await asyncio.gather(
            availability_service.save_weekly_availability(self.partner_id, availability),
            capacity_service.save_partner_capacity(self.partner_id, capacity),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
        failures = [r for r in results if isinstance(r, Exception)]
        if failures:
            logger.warning("Saving settings for %s failed: %s", self.partner_id, failures)
            raise ExternalServiceError(
                f"Failed to save settings for {self.partner_id}: "
                + "; ".join(str(f) for f in failures),
                operation="save_settings",
            ) from failures[0]

        self.saved_availability = availability
        self.saved_capacity = capacity
        logger.info(
            "Settings saved for %s: %d active days, %d bays",
            self.partner_id, self.active_days, self.total_bays,
        )
