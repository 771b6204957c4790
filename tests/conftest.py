"""Shared test fixtures and helpers."""

from datetime import date, datetime
from typing import Optional

import pytest

from partner_schedule.booking.state_machine import BookingStateMachine, StartPolicy
from partner_schedule.schemas.availability_schema import TimeBlock
from partner_schedule.schemas.booking_schema import (
    Booking,
    BookingSlot,
    BookingStatus,
    CustomerInfo,
    ServiceInfo,
)
from partner_schedule.schedule.availability import default_weekly_availability
from partner_schedule.schedule.capacity import default_partner_capacity
from partner_schedule.tools import availability as availability_service
from partner_schedule.tools import bookings as booking_service
from partner_schedule.tools import capacity as capacity_service

# Wednesday 19 March 2025, 10:00
FIXED_NOW = datetime(2025, 3, 19, 10, 0)
TODAY = FIXED_NOW.date()


@pytest.fixture(autouse=True)
def clean_services():
    availability_service.reset()
    capacity_service.reset()
    booking_service.reset()
    yield
    availability_service.reset()
    capacity_service.reset()
    booking_service.reset()


@pytest.fixture
def machine():
    return BookingStateMachine(StartPolicy.NOT_ELAPSED)


@pytest.fixture
def strict_machine():
    return BookingStateMachine(StartPolicy.AT_SLOT_START)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def weekly():
    return default_weekly_availability("partner-1")


@pytest.fixture
def capacity():
    return default_partner_capacity("partner-1")


def block(start: str, end: str) -> TimeBlock:
    """Helper to create a TimeBlock without the empty-interval check."""
    return TimeBlock(start=start, end=end)


def blocks(*pairs: tuple[str, str]) -> tuple[TimeBlock, ...]:
    return tuple(block(s, e) for s, e in pairs)


def make_booking(
    booking_id: str = "bk-1",
    status: BookingStatus = BookingStatus.BOOKED,
    slot_date: date = TODAY,
    start: str = "14:00",
    end: str = "15:00",
    partner_id: str = "partner-1",
    booking_number: Optional[str] = None,
) -> Booking:
    """Helper to create a Booking with sensible defaults."""
    return Booking(
        id=booking_id,
        booking_number=booking_number or f"BK-{booking_id.upper()}",
        partner_id=partner_id,
        status=status,
        slot=BookingSlot(date=slot_date, start_time=start, end_time=end),
        service=ServiceInfo(id="svc_basic", name="Basic Wash", duration_minutes=60),
        customer=CustomerInfo(id="cust-1", name="John Smith", phone="0412345678"),
    )
