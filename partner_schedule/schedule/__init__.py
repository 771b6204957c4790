from partner_schedule.schedule.availability import (
    EditOp,
    default_weekly_availability,
    edit_day_blocks,
    set_day_enabled,
    validate,
)
from partner_schedule.schedule.capacity import default_partner_capacity, set_buffer_time, set_capacity
from partner_schedule.schedule.edit_session import ScheduleEditSession
from partner_schedule.schedule.gestures import apply_drag
from partner_schedule.schedule.intervals import insert, make_block, remove, remove_at

__all__ = [
    "EditOp",
    "default_weekly_availability",
    "edit_day_blocks",
    "set_day_enabled",
    "validate",
    "default_partner_capacity",
    "set_capacity",
    "set_buffer_time",
    "ScheduleEditSession",
    "apply_drag",
    "insert",
    "remove",
    "remove_at",
    "make_block",
]
