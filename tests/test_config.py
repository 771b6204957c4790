"""Tests for configuration loading and validation."""

import logging

import pytest

from partner_schedule.config import AppConfig, _validate_config


def _schedule(grid=30, threshold=1.5, buffer=15, advance=14):
    from partner_schedule.config import ScheduleConfig

    schedule = ScheduleConfig.__new__(ScheduleConfig)
    object.__setattr__(schedule, "grid_minutes", grid)
    object.__setattr__(schedule, "point_query_threshold_pct", threshold)
    object.__setattr__(schedule, "default_buffer_minutes", buffer)
    object.__setattr__(schedule, "default_max_advance_days", advance)
    return schedule


def _config(schedule=None, capacity=None, booking=None):
    from partner_schedule.config import BookingConfig, CapacityConfig

    config = AppConfig.__new__(AppConfig)
    object.__setattr__(config, "schedule", schedule or _schedule())
    object.__setattr__(config, "capacity", capacity or CapacityConfig())
    object.__setattr__(config, "booking", booking or BookingConfig())
    object.__setattr__(config, "log_level", "INFO")
    object.__setattr__(config, "app_name", "test")
    return config


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    @pytest.mark.parametrize("grid", [15, 30, 60])
    def test_grid_divisors_accepted(self, grid):
        _validate_config(_config(_schedule(grid=grid)))

    @pytest.mark.parametrize("grid", [0, -30, 7, 45 * 7])
    def test_invalid_grid(self, grid):
        with pytest.raises(ValueError, match="SCHEDULE_GRID_MINUTES"):
            _validate_config(_config(_schedule(grid=grid)))

    def test_invalid_threshold(self):
        with pytest.raises(ValueError, match="POINT_QUERY_THRESHOLD_PCT"):
            _validate_config(_config(_schedule(threshold=120.0)))

    def test_negative_buffer(self):
        with pytest.raises(ValueError, match="DEFAULT_BUFFER_MINUTES"):
            _validate_config(_config(_schedule(buffer=-1)))

    def test_zero_advance_days(self):
        with pytest.raises(ValueError, match="DEFAULT_MAX_ADVANCE_DAYS"):
            _validate_config(_config(_schedule(advance=0)))

    def test_negative_default_bays(self):
        from partner_schedule.config import CapacityConfig

        capacity = CapacityConfig.__new__(CapacityConfig)
        object.__setattr__(capacity, "default_wash_bays", -1)
        object.__setattr__(capacity, "default_detailing_bays", 1)
        object.__setattr__(capacity, "default_other_bays", 0)
        object.__setattr__(capacity, "max_bay_input", 20)

        with pytest.raises(ValueError, match="DEFAULT_WASH_BAYS"):
            _validate_config(_config(capacity=capacity))

    def test_unknown_start_policy(self):
        from partner_schedule.config import BookingConfig

        booking = BookingConfig.__new__(BookingConfig)
        object.__setattr__(booking, "start_policy", "whenever")

        with pytest.raises(ValueError, match="BOOKING_START_POLICY"):
            _validate_config(_config(booking=booking))

    def test_safe_int_parsing(self):
        from partner_schedule.config import _safe_int

        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_rejects_garbage(self, monkeypatch):
        from partner_schedule.config import _safe_int

        monkeypatch.setenv("PARTNER_SCHEDULE_TEST_INT", "thirty")
        with pytest.raises(ValueError, match="PARTNER_SCHEDULE_TEST_INT"):
            _safe_int("PARTNER_SCHEDULE_TEST_INT", "30")

    def test_safe_float_parsing(self):
        from partner_schedule.config import _safe_float

        assert _safe_float("NONEXISTENT_VAR_12345", "1.5") == pytest.approx(1.5)


class TestPartnerLogging:
    def test_filter_attaches_partner_id(self):
        from partner_schedule.logging_context import PartnerIdFilter, set_partner_id

        set_partner_id("partner-9")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert PartnerIdFilter().filter(record)
        assert record.partner_id == "partner-9"

    def test_logger_gets_single_filter(self):
        from partner_schedule.logging_context import PartnerIdFilter, get_partner_logger

        get_partner_logger("partner_schedule.test")
        logger = get_partner_logger("partner_schedule.test")
        assert sum(isinstance(f, PartnerIdFilter) for f in logger.filters) == 1

    def test_log_output_includes_partner_id(self):
        import io

        from partner_schedule.config import LOG_FORMAT
        from partner_schedule.logging_context import attach_partner_filter, set_partner_id

        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        attach_partner_filter(handler)
        attach_partner_filter(handler)
        assert len(handler.filters) == 1

        logger = logging.getLogger("partner_schedule.test_output")
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        try:
            set_partner_id("partner-42")
            logger.info("Saving schedule")
        finally:
            logger.removeHandler(handler)

        assert "[partner-42]" in stream.getvalue()
        assert "Saving schedule" in stream.getvalue()
