"""
Finite state machine for the booking lifecycle.

Defines which actions (start, complete, cancel, reschedule) are legal for
a booking given its status and the wall-clock time relative to its slot.
Every transition is listed explicitly; anything not in the table is
rejected before a booking service call is made, and the booking passed in
is never modified.

Usage:
    machine = BookingStateMachine()
    started = machine.start(booking, now=now)
    assert started.status == BookingStatus.IN_PROGRESS
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from partner_schedule.config import settings
from partner_schedule.errors import IllegalTransitionError, SlotUnavailableError
from partner_schedule.schemas.availability_schema import WeeklyAvailability
from partner_schedule.schemas.booking_schema import (
    Booking,
    BookingSlot,
    BookingStatus,
    CancelledBy,
)
from partner_schedule.schedule.availability import (
    is_within_availability,
    is_within_booking_window,
)
from partner_schedule.schedule.intervals import make_block
from partner_schedule.utils import combine

logger = logging.getLogger(__name__)


class BookingAction(str, Enum):
    """Actions a partner can take on a booking."""
    START = "start"
    COMPLETE = "complete"
    CANCEL = "cancel"
    RESCHEDULE = "reschedule"


class StartPolicy(str, Enum):
    """When a booked job may be started.

    NOT_ELAPSED allows starting any time before the slot ends.
    AT_SLOT_START additionally waits for the slot's start time.
    """
    NOT_ELAPSED = "not_elapsed"
    AT_SLOT_START = "at_slot_start"


# Actions whose guards need input collected from the partner (a reason or a
# new slot); they are offered on status alone.
INPUT_ACTIONS = frozenset({BookingAction.CANCEL, BookingAction.RESCHEDULE})


def slot_start(slot: BookingSlot, now: datetime) -> datetime:
    return combine(slot.date, slot.start_time, tzinfo=now.tzinfo)


def slot_end(slot: BookingSlot, now: datetime) -> datetime:
    return combine(slot.date, slot.end_time, tzinfo=now.tzinfo)


def is_slot_in_past(slot: BookingSlot, now: datetime) -> bool:
    """A slot is in the past once its end time has been reached."""
    return now >= slot_end(slot, now)


def is_slot_active(slot: BookingSlot, now: datetime) -> bool:
    """True while ``now`` is within the slot's window, ends included."""
    return slot_start(slot, now) <= now <= slot_end(slot, now)


@dataclass(frozen=True)
class TransitionContext:
    """Inputs a guard may consult besides the booking itself."""
    now: datetime
    reason: Optional[str] = None
    cancelled_by: CancelledBy = CancelledBy.PARTNER
    new_slot: Optional[BookingSlot] = None
    availability: Optional[WeeklyAvailability] = None


# A guard returns None when the transition is allowed, otherwise why not.
Guard = Callable[[Booking, TransitionContext, StartPolicy], Optional[str]]


@dataclass
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    action: BookingAction
    to_status: BookingStatus
    guard: Optional[Guard] = None
    denied_error: type = IllegalTransitionError


def _guard_start(booking: Booking, ctx: TransitionContext, policy: StartPolicy) -> Optional[str]:
    if is_slot_in_past(booking.slot, ctx.now):
        return f"slot ended at {booking.slot.date} {booking.slot.end_time}"
    if policy == StartPolicy.AT_SLOT_START and ctx.now < slot_start(booking.slot, ctx.now):
        return f"slot does not start until {booking.slot.date} {booking.slot.start_time}"
    return None


def _guard_cancel(booking: Booking, ctx: TransitionContext, policy: StartPolicy) -> Optional[str]:
    if not ctx.reason or not ctx.reason.strip():
        return "a cancellation reason is required"
    return None


def _guard_reschedule(booking: Booking, ctx: TransitionContext, policy: StartPolicy) -> Optional[str]:
    new_slot, availability = ctx.new_slot, ctx.availability
    if new_slot is None:
        return "a new slot is required"
    if availability is None:
        return "partner availability is required to check the new slot"
    try:
        make_block(new_slot.start_time, new_slot.end_time)
    except ValueError as exc:
        return f"new slot is not a valid time range: {exc}"
    if not is_within_booking_window(availability, new_slot.date, ctx.now.date()):
        return (
            f"{new_slot.date} is outside the {availability.max_advance_booking_days}-day "
            "booking window"
        )
    if is_slot_in_past(new_slot, ctx.now):
        return f"new slot {new_slot.date} {new_slot.start_time} has already passed"
    if not is_within_availability(availability, new_slot):
        return (
            f"partner is not available on {new_slot.date} "
            f"{new_slot.start_time}-{new_slot.end_time}"
        )
    return None


class BookingStateMachine:
    """
    Deterministic guard over booking status changes.

    Holds no per-booking state: each call takes a booking and returns a
    new one, so a rejected action can never leave a half-updated booking.
    """

    TRANSITIONS: list[Transition] = [
        # --- Happy path ---
        Transition(BookingStatus.BOOKED, BookingAction.START,
                   BookingStatus.IN_PROGRESS, _guard_start),
        Transition(BookingStatus.IN_PROGRESS, BookingAction.COMPLETE,
                   BookingStatus.COMPLETED),

        # --- Side exits ---
        Transition(BookingStatus.BOOKED, BookingAction.CANCEL,
                   BookingStatus.CANCELLED, _guard_cancel),
        Transition(BookingStatus.BOOKED, BookingAction.RESCHEDULE,
                   BookingStatus.BOOKED, _guard_reschedule, SlotUnavailableError),
    ]

    def __init__(self, start_policy: Optional[StartPolicy] = None) -> None:
        self.start_policy = start_policy or StartPolicy(settings.booking.start_policy)

    def _find(self, status: BookingStatus, action: BookingAction) -> Optional[Transition]:
        for t in self.TRANSITIONS:
            if t.from_status == status and t.action == action:
                return t
        return None

    def get_valid_actions(self, status: BookingStatus) -> list[BookingAction]:
        """Actions that exist for ``status``, ignoring guards."""
        return [t.action for t in self.TRANSITIONS if t.from_status == status]

    def check(self, booking: Booking, action: BookingAction, ctx: TransitionContext) -> Transition:
        """
        Find the transition for ``action`` and run its guard.

        Raises:
            IllegalTransitionError: If no transition exists or its guard refuses.
            SlotUnavailableError: If a reschedule target is not bookable.
        """
        transition = self._find(booking.status, action)
        if transition is None:
            valid = [a.value for a in self.get_valid_actions(booking.status)]
            raise IllegalTransitionError(
                f"Cannot {action.value} booking {booking.id} in status "
                f"'{booking.status.value}'. Valid actions: {valid}",
                status=booking.status.value,
                action=action.value,
            )
        if transition.guard is not None:
            denied = transition.guard(booking, ctx, self.start_policy)
            if denied:
                raise transition.denied_error(
                    f"Cannot {action.value} booking {booking.id}: {denied}",
                    status=booking.status.value,
                    action=action.value,
                )
        return transition

    def can(self, booking: Booking, action: BookingAction, ctx: TransitionContext) -> bool:
        """True if ``action`` would pass ``check``; never raises for a refused action."""
        try:
            self.check(booking, action, ctx)
        except IllegalTransitionError:
            return False
        return True

    def available_actions(self, booking: Booking, now: datetime) -> list[BookingAction]:
        """Actions to enable for a booking at ``now``.

        Cancel and reschedule need partner input first, so they are
        offered whenever the status allows them.
        """
        ctx = TransitionContext(now=now)
        return [
            action
            for action in self.get_valid_actions(booking.status)
            if action in INPUT_ACTIONS or self.can(booking, action, ctx)
        ]

    def apply(self, booking: Booking, action: BookingAction, ctx: TransitionContext) -> Booking:
        """Validate ``action`` and return the booking as it would be afterwards."""
        transition = self.check(booking, action, ctx)

        update: dict = {"status": transition.to_status}
        if action == BookingAction.START:
            update["started_at"] = ctx.now
        elif action == BookingAction.COMPLETE:
            update["completed_at"] = ctx.now
        elif action == BookingAction.CANCEL:
            update.update(
                cancelled_at=ctx.now,
                cancelled_by=ctx.cancelled_by,
                cancellation_reason=ctx.reason.strip(),
            )
        elif action == BookingAction.RESCHEDULE:
            update.update(
                slot=ctx.new_slot,
                rescheduled_from=booking.slot,
                rescheduled_at=ctx.now,
            )

        logger.debug(
            "Booking %s: %s -> %s (action: %s)",
            booking.id, booking.status.value, transition.to_status.value, action.value,
        )
        return booking.model_copy(update=update)

    def start(self, booking: Booking, now: Optional[datetime] = None) -> Booking:
        return self.apply(booking, BookingAction.START, TransitionContext(now=now or datetime.now()))

    def complete(self, booking: Booking, now: Optional[datetime] = None) -> Booking:
        return self.apply(
            booking, BookingAction.COMPLETE, TransitionContext(now=now or datetime.now())
        )

    def cancel(
        self,
        booking: Booking,
        reason: str,
        now: Optional[datetime] = None,
        cancelled_by: CancelledBy = CancelledBy.PARTNER,
    ) -> Booking:
        ctx = TransitionContext(now=now or datetime.now(), reason=reason, cancelled_by=cancelled_by)
        return self.apply(booking, BookingAction.CANCEL, ctx)

    def reschedule(
        self,
        booking: Booking,
        new_slot: BookingSlot,
        availability: WeeklyAvailability,
        now: Optional[datetime] = None,
    ) -> Booking:
        """Move a booked job to ``new_slot``; its status stays BOOKED."""
        ctx = TransitionContext(
            now=now or datetime.now(), new_slot=new_slot, availability=availability
        )
        return self.apply(booking, BookingAction.RESCHEDULE, ctx)
