"""Booking data models as returned by the booking service."""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from partner_schedule.schemas.availability_schema import TIME_PATTERN
from partner_schedule.schemas.capacity_schema import ServiceCategory


class BookingStatus(str, Enum):
    """Every status the booking service can report.

    Only BOOKED, IN_PROGRESS, COMPLETED and CANCELLED are driven by the
    state machine. PICKED, OUT_FOR_DELIVERY and DELIVERED belong to the
    pick-up/delivery tracking flow, and RESCHEDULED is a history marker
    written by the service.
    """
    BOOKED = "booked"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PICKED = "picked"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class CancelledBy(str, Enum):
    CUSTOMER = "customer"
    PARTNER = "partner"


class BookingSlot(BaseModel):
    """A booking's concrete reserved window."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)


class ServiceInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: ServiceCategory = ServiceCategory.WASH
    duration_minutes: int = Field(default=30, ge=0)


class CustomerInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    phone: str = ""
    email: str = ""


class VehicleInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    make: str = "Unknown"
    model: str = "Unknown"
    color: str = ""
    plate_number: str = ""
    type: str = "sedan"


class BookingPricing(BaseModel):
    """Price breakdown computed by the booking service; never recomputed here."""

    model_config = ConfigDict(frozen=True)

    base_price: float = 0.0
    final_price: float = 0.0
    platform_fee: float = 0.0
    partner_payout: float = 0.0


class Booking(BaseModel):
    """A single reserved slot tied to a customer, vehicle and service."""

    model_config = ConfigDict(frozen=True)

    id: str
    booking_number: str = ""
    partner_id: str
    status: BookingStatus = BookingStatus.BOOKED
    slot: BookingSlot
    service: ServiceInfo
    customer: CustomerInfo
    vehicle: VehicleInfo = Field(default_factory=VehicleInfo)
    pricing: BookingPricing = Field(default_factory=BookingPricing)
    bay_id: Optional[str] = None
    bay_name: Optional[str] = None
    started_at: Optional[dt.datetime] = None
    completed_at: Optional[dt.datetime] = None
    cancelled_at: Optional[dt.datetime] = None
    cancelled_by: Optional[CancelledBy] = None
    cancellation_reason: Optional[str] = None
    rescheduled_from: Optional[BookingSlot] = None
    rescheduled_at: Optional[dt.datetime] = None
