from partner_schedule.booking.state_machine import (
    BookingAction,
    BookingStateMachine,
    StartPolicy,
    is_slot_active,
    is_slot_in_past,
)

__all__ = [
    "BookingAction",
    "BookingStateMachine",
    "StartPolicy",
    "is_slot_active",
    "is_slot_in_past",
]
