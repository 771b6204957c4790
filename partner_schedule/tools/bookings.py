"""
Mock booking service.

In production, this would call the slot booking API (list, status update,
cancel, reschedule). Like the real service it re-checks a few basics, but
callers are expected to have validated the transition locally first.
"""

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Optional

from partner_schedule.errors import ExternalServiceError
from partner_schedule.schemas.booking_schema import (
    Booking,
    BookingSlot,
    BookingStatus,
    CancelledBy,
)

logger = logging.getLogger(__name__)

_bookings: dict[str, dict] = {}


def _load(booking_id: str, operation: str) -> Booking:
    stored = _bookings.get(booking_id)
    if stored is None:
        raise ExternalServiceError(f"Booking {booking_id} not found.", operation=operation)
    return Booking.model_validate(stored)


def _store(booking: Booking) -> Booking:
    _bookings[booking.id] = booking.model_dump()
    return booking


def add_booking(booking: Booking) -> Booking:
    """Seed a booking, assigning a booking number if it has none."""
    if not booking.booking_number:
        booking = booking.model_copy(
            update={"booking_number": f"BK-{uuid.uuid4().hex[:6].upper()}"}
        )
    return _store(booking)


def get_booking(booking_id: str) -> Optional[Booking]:
    """Retrieve a booking by id."""
    stored = _bookings.get(booking_id)
    return Booking.model_validate(stored) if stored is not None else None


async def list_bookings(partner_id: str, start: date, end: date) -> list[Booking]:
    """Bookings for a partner with slot dates in ``start``..``end`` inclusive."""
    found = [
        Booking.model_validate(b)
        for b in _bookings.values()
        if b["partner_id"] == partner_id and start <= b["slot"]["date"] <= end
    ]
    return sorted(found, key=lambda b: (b.slot.date, b.slot.start_time))


async def update_booking_status(booking_id: str, status: BookingStatus) -> Booking:
    booking = _load(booking_id, "update_booking_status")
    now = datetime.now(timezone.utc)
    update: dict = {"status": status}
    if status == BookingStatus.IN_PROGRESS:
        update["started_at"] = now
    elif status == BookingStatus.COMPLETED:
        update["completed_at"] = now
    logger.info("Booking %s status: %s -> %s", booking_id, booking.status.value, status.value)
    return _store(booking.model_copy(update=update))


async def cancel_booking(
    booking_id: str, reason: str, cancelled_by: CancelledBy = CancelledBy.PARTNER
) -> Booking:
    booking = _load(booking_id, "cancel_booking")
    if booking.status == BookingStatus.CANCELLED:
        raise ExternalServiceError(
            f"Booking {booking_id} is already cancelled.", operation="cancel_booking"
        )
    logger.info("Booking cancelled: %s (%s)", booking_id, reason)
    return _store(
        booking.model_copy(
            update={
                "status": BookingStatus.CANCELLED,
                "cancelled_at": datetime.now(timezone.utc),
                "cancelled_by": cancelled_by,
                "cancellation_reason": reason,
            }
        )
    )


async def reschedule_booking(booking_id: str, new_slot: BookingSlot) -> Booking:
    booking = _load(booking_id, "reschedule_booking")
    if booking.status == BookingStatus.CANCELLED:
        raise ExternalServiceError(
            "Cannot reschedule a cancelled booking", operation="reschedule_booking"
        )
    logger.info(
        "Booking rescheduled: %s to %s %s", booking_id, new_slot.date, new_slot.start_time
    )
    return _store(
        booking.model_copy(
            update={
                "slot": new_slot,
                "rescheduled_from": booking.slot,
                "rescheduled_at": datetime.now(timezone.utc),
            }
        )
    )


def reset() -> None:
    """Clear all bookings. Used by test fixtures for isolation."""
    _bookings.clear()
