"""
Booking actions: validate locally, then call the booking service.

The state machine is checked first, so an illegal action never reaches
the service. If the service call fails, ExternalServiceError propagates
and the caller still holds the unchanged booking.
"""

from datetime import date, datetime
from typing import Awaitable, Callable, Optional

from partner_schedule.booking.state_machine import BookingAction, BookingStateMachine
from partner_schedule.errors import ExternalServiceError, IllegalTransitionError
from partner_schedule.logging_context import get_partner_logger, set_partner_id
from partner_schedule.schemas.availability_schema import WeeklyAvailability
from partner_schedule.schemas.booking_schema import (
    Booking,
    BookingSlot,
    BookingStatus,
    CancelledBy,
)
from partner_schedule.tools import bookings as booking_service

logger = get_partner_logger(__name__)


async def _run(
    action: BookingAction,
    booking: Booking,
    validate: Callable[[], Booking],
    call: Callable[[], Awaitable[Booking]],
) -> Booking:
    set_partner_id(booking.partner_id)
    try:
        validate()
    except IllegalTransitionError as exc:
        logger.warning("%s rejected: %s", action.value.capitalize(), exc)
        raise
    try:
        return await call()
    except ExternalServiceError:
        logger.warning("%s failed at the booking service for %s", action.value, booking.id)
        raise


async def load_bookings(partner_id: str, start: date, end: date) -> list[Booking]:
    """Bookings for a partner's calendar between two dates inclusive."""
    set_partner_id(partner_id)
    found = await booking_service.list_bookings(partner_id, start, end)
    logger.debug("Loaded %d bookings for %s..%s", len(found), start, end)
    return found


def available_actions_by_booking(
    bookings: list[Booking], now: datetime, machine: Optional[BookingStateMachine] = None
) -> dict[str, list[BookingAction]]:
    """Map each booking id to the actions its detail view should enable."""
    sm = machine or BookingStateMachine()
    return {b.id: sm.available_actions(b, now) for b in bookings}


async def start_service(
    booking: Booking, now: Optional[datetime] = None, machine: Optional[BookingStateMachine] = None
) -> Booking:
    """Mark a booked job as in progress."""
    sm = machine or BookingStateMachine()
    return await _run(
        BookingAction.START,
        booking,
        lambda: sm.start(booking, now),
        lambda: booking_service.update_booking_status(booking.id, BookingStatus.IN_PROGRESS),
    )


async def complete_service(
    booking: Booking, now: Optional[datetime] = None, machine: Optional[BookingStateMachine] = None
) -> Booking:
    """Mark an in-progress job as completed."""
    sm = machine or BookingStateMachine()
    return await _run(
        BookingAction.COMPLETE,
        booking,
        lambda: sm.complete(booking, now),
        lambda: booking_service.update_booking_status(booking.id, BookingStatus.COMPLETED),
    )


async def cancel_booking(
    booking: Booking,
    reason: str,
    cancelled_by: CancelledBy = CancelledBy.PARTNER,
    now: Optional[datetime] = None,
    machine: Optional[BookingStateMachine] = None,
) -> Booking:
    """Cancel a booked job. There is no undo."""
    sm = machine or BookingStateMachine()
    return await _run(
        BookingAction.CANCEL,
        booking,
        lambda: sm.cancel(booking, reason, now, cancelled_by),
        lambda: booking_service.cancel_booking(booking.id, reason.strip(), cancelled_by),
    )


async def reschedule_booking(
    booking: Booking,
    new_slot: BookingSlot,
    availability: WeeklyAvailability,
    now: Optional[datetime] = None,
    machine: Optional[BookingStateMachine] = None,
) -> Booking:
    """Move a booked job to a slot inside the partner's published hours."""
    sm = machine or BookingStateMachine()
    return await _run(
        BookingAction.RESCHEDULE,
        booking,
        lambda: sm.reschedule(booking, new_slot, availability, now),
        lambda: booking_service.reschedule_booking(booking.id, new_slot),
    )
