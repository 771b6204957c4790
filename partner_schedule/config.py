"""
Centralized configuration with environment variable overrides.

Grid size, drag thresholds, default schedule and capacity values, and the
booking start policy are all configurable here. Nothing is hardcoded in
the interval, capacity or state machine logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from partner_schedule.logging_context import attach_partner_filter

load_dotenv()

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
START_POLICIES = ("not_elapsed", "at_slot_start")
LOG_FORMAT = "%(asctime)s [%(name)s] [%(partner_id)s] %(levelname)s: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class ScheduleConfig:
    """Weekly schedule editing settings."""

    grid_minutes: int = _safe_int("SCHEDULE_GRID_MINUTES", "30")
    point_query_threshold_pct: float = _safe_float("POINT_QUERY_THRESHOLD_PCT", "1.5")
    default_buffer_minutes: int = _safe_int("DEFAULT_BUFFER_MINUTES", "15")
    default_max_advance_days: int = _safe_int("DEFAULT_MAX_ADVANCE_DAYS", "14")


@dataclass(frozen=True)
class CapacityConfig:
    """Default bay counts for partners without a saved capacity document."""

    default_wash_bays: int = _safe_int("DEFAULT_WASH_BAYS", "3")
    default_detailing_bays: int = _safe_int("DEFAULT_DETAILING_BAYS", "1")
    default_other_bays: int = _safe_int("DEFAULT_OTHER_BAYS", "0")
    # Input cap for editing screens only; the capacity model accepts any count >= 0.
    max_bay_input: int = _safe_int("MAX_BAY_INPUT", "20")


@dataclass(frozen=True)
class BookingConfig:
    """Booking lifecycle settings."""

    start_policy: str = os.getenv("BOOKING_START_POLICY", "not_elapsed")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    capacity: CapacityConfig = field(default_factory=CapacityConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "partner-schedule")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    grid = config.schedule.grid_minutes
    if grid < 1 or MINUTES_PER_DAY % grid != 0:
        raise ValueError(
            f"SCHEDULE_GRID_MINUTES must be a positive divisor of {MINUTES_PER_DAY}, got {grid}"
        )
    if not 0.0 <= config.schedule.point_query_threshold_pct < 100.0:
        raise ValueError(
            "POINT_QUERY_THRESHOLD_PCT must be between 0 and 100, "
            f"got {config.schedule.point_query_threshold_pct}"
        )
    if config.schedule.default_buffer_minutes < 0:
        raise ValueError(
            f"DEFAULT_BUFFER_MINUTES must be >= 0, got {config.schedule.default_buffer_minutes}"
        )
    if config.schedule.default_max_advance_days < 1:
        raise ValueError(
            f"DEFAULT_MAX_ADVANCE_DAYS must be >= 1, got {config.schedule.default_max_advance_days}"
        )

    for name, value in [
        ("DEFAULT_WASH_BAYS", config.capacity.default_wash_bays),
        ("DEFAULT_DETAILING_BAYS", config.capacity.default_detailing_bays),
        ("DEFAULT_OTHER_BAYS", config.capacity.default_other_bays),
    ]:
        if value < 0:
            raise ValueError(f"{name} must be >= 0, got {value}")

    if config.capacity.max_bay_input < 1:
        raise ValueError(
            f"MAX_BAY_INPUT must be >= 1, got {config.capacity.max_bay_input}"
        )
    if config.booking.start_policy not in START_POLICIES:
        raise ValueError(
            f"BOOKING_START_POLICY must be one of {list(START_POLICIES)}, "
            f"got {config.booking.start_policy!r}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        attach_partner_filter(handler)
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
