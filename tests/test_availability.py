"""Tests for the weekly availability model."""

from datetime import date, timedelta

import pytest

from partner_schedule.errors import EmptyIntervalError, InvariantViolationError
from partner_schedule.schemas.booking_schema import BookingSlot
from partner_schedule.schedule.availability import (
    EditOp,
    active_days,
    assert_valid,
    default_weekly_availability,
    edit_day_blocks,
    get_day,
    is_within_availability,
    is_within_booking_window,
    set_day_blocks,
    set_day_enabled,
    validate,
)
from tests.conftest import TODAY, block, blocks

MONDAY = 1
WEDNESDAY = 3


class TestDefaults:
    def test_seven_days_sunday_first(self, weekly):
        assert [d.day_of_week for d in weekly.days] == list(range(7))
        assert weekly.days[0].day_name == "Sunday"

    def test_sunday_off(self, weekly):
        sunday = get_day(weekly, 0)
        assert not sunday.is_enabled
        assert sunday.blocks == ()

    def test_weekday_hours(self, weekly):
        assert get_day(weekly, MONDAY).blocks == blocks(("08:00", "18:00"))

    def test_saturday_hours(self, weekly):
        assert get_day(weekly, 6).blocks == blocks(("09:00", "14:00"))

    def test_window_settings(self, weekly):
        assert weekly.buffer_time_minutes == 15
        assert weekly.max_advance_booking_days == 14

    def test_defaults_are_valid(self, weekly):
        assert validate(weekly, grid=30) == []

    def test_active_days(self, weekly):
        assert active_days(weekly) == 6


class TestEditing:
    def test_insert_only_touches_one_day(self, weekly):
        updated = edit_day_blocks(weekly, MONDAY, EditOp.INSERT, block("19:00", "21:00"))
        assert get_day(updated, MONDAY).blocks == blocks(("08:00", "18:00"), ("19:00", "21:00"))
        for day in (0, 2, 3, 4, 5, 6):
            assert get_day(updated, day) == get_day(weekly, day)

    def test_original_is_unchanged(self, weekly):
        edit_day_blocks(weekly, MONDAY, EditOp.REMOVE, block("12:00", "13:00"))
        assert get_day(weekly, MONDAY).blocks == blocks(("08:00", "18:00"))

    def test_remove_splits_day(self, weekly):
        updated = edit_day_blocks(weekly, MONDAY, EditOp.REMOVE, block("12:00", "13:00"))
        assert get_day(updated, MONDAY).blocks == blocks(("08:00", "12:00"), ("13:00", "18:00"))

    def test_empty_span_rejected(self, weekly):
        with pytest.raises(EmptyIntervalError):
            edit_day_blocks(weekly, MONDAY, EditOp.INSERT, block("10:00", "09:00"))

    def test_unknown_day_rejected(self, weekly):
        with pytest.raises(KeyError):
            edit_day_blocks(weekly, 7, EditOp.INSERT, block("09:00", "10:00"))

    def test_disable_keeps_blocks(self, weekly):
        updated = set_day_enabled(weekly, MONDAY, False)
        monday = get_day(updated, MONDAY)
        assert not monday.is_enabled
        assert monday.blocks == blocks(("08:00", "18:00"))

    def test_set_day_blocks_rejects_non_canonical(self, weekly):
        with pytest.raises(InvariantViolationError) as exc_info:
            set_day_blocks(weekly, MONDAY, blocks(("08:00", "10:00"), ("10:00", "12:00")))
        assert exc_info.value.violations


class TestValidation:
    def test_missing_day_reported(self, weekly):
        broken = weekly.model_copy(update={"days": weekly.days[:6]})
        assert any("exactly once" in v for v in validate(broken))

    def test_overlapping_blocks_reported(self, weekly):
        monday = get_day(weekly, MONDAY).model_copy(
            update={"blocks": blocks(("08:00", "12:00"), ("11:00", "13:00"))}
        )
        days = tuple(monday if d.day_of_week == MONDAY else d for d in weekly.days)
        broken = weekly.model_copy(update={"days": days})
        assert any(v.startswith("Monday") for v in validate(broken))

    def test_off_grid_boundary_reported(self, weekly):
        updated = edit_day_blocks(weekly, MONDAY, EditOp.INSERT, block("19:15", "20:00"))
        assert validate(updated) == []
        assert any("grid" in v for v in validate(updated, grid=30))

    def test_negative_buffer_reported(self, weekly):
        broken = weekly.model_copy(update={"buffer_time_minutes": -5})
        assert any("buffer_time_minutes" in v for v in validate(broken))

    def test_zero_advance_window_reported(self, weekly):
        broken = weekly.model_copy(update={"max_advance_booking_days": 0})
        assert any("max_advance_booking_days" in v for v in validate(broken))

    def test_assert_valid_raises_with_violations(self, weekly):
        broken = weekly.model_copy(update={"buffer_time_minutes": -5})
        with pytest.raises(InvariantViolationError) as exc_info:
            assert_valid(broken)
        assert len(exc_info.value.violations) == 1

    def test_assert_valid_passes(self, weekly):
        assert_valid(weekly)


class TestSlotChecks:
    def test_slot_inside_block(self, weekly):
        slot = BookingSlot(date=TODAY, start_time="09:00", end_time="10:00")
        assert is_within_availability(weekly, slot)

    def test_slot_past_closing(self, weekly):
        slot = BookingSlot(date=TODAY, start_time="17:30", end_time="18:30")
        assert not is_within_availability(weekly, slot)

    def test_slot_across_gap(self, weekly):
        updated = edit_day_blocks(weekly, WEDNESDAY, EditOp.REMOVE, block("12:00", "13:00"))
        slot = BookingSlot(date=TODAY, start_time="11:30", end_time="12:30")
        assert not is_within_availability(updated, slot)

    def test_slot_on_disabled_day(self, weekly):
        updated = set_day_enabled(weekly, WEDNESDAY, False)
        slot = BookingSlot(date=TODAY, start_time="09:00", end_time="10:00")
        assert not is_within_availability(updated, slot)

    def test_booking_window(self, weekly):
        assert is_within_booking_window(weekly, TODAY, TODAY)
        assert is_within_booking_window(weekly, TODAY + timedelta(days=14), TODAY)
        assert not is_within_booking_window(weekly, TODAY + timedelta(days=15), TODAY)
        assert not is_within_booking_window(weekly, TODAY - timedelta(days=1), TODAY)

    def test_today_is_wednesday(self):
        assert TODAY == date(2025, 3, 19)
