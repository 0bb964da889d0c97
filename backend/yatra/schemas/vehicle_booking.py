"""Vehicle booking schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from yatra.models.vehicle import TourType
from yatra.models.vehicle_booking import RentalStatus
from yatra.schemas.pricing import AppliedDiscountRead, BookingPriceRequest


class VehicleBookingCreate(BookingPriceRequest):
    """Payload for booking vehicles."""

    destination: str | None = None
    pickup_location: str | None = None
    dropoff_location: str | None = None
    special_requests: str | None = None


class VehicleBookingUpdate(BaseModel):
    """Customer-editable fields of a pending booking."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    number_of_vehicles: int | None = Field(default=None, ge=1)
    tour_type: TourType | None = None
    estimated_distance_km: Decimal | None = Field(default=None, ge=Decimal("0"))
    needs_driver: bool | None = None
    number_of_drivers: int | None = Field(default=None, ge=0)
    coupon_code: str | None = None
    advance_amount: Decimal | None = Field(default=None, ge=Decimal("0"))
    destination: str | None = None
    pickup_location: str | None = None
    dropoff_location: str | None = None
    special_requests: str | None = None


class VehicleBookingCancel(BaseModel):
    """Cancellation payload."""

    cancellation_reason: str | None = Field(default=None, max_length=1024)


class VehicleBookingStatusUpdate(BaseModel):
    """Admin status change payload."""

    status: RentalStatus


class VehicleBookingRead(BaseModel):
    """Serialized vehicle booking."""

    id: uuid.UUID
    booking_code: str
    user_id: uuid.UUID
    vehicle_id: uuid.UUID
    status: RentalStatus
    start_date: datetime
    end_date: datetime
    duration_days: int
    number_of_vehicles: int
    destination: str | None = None
    pickup_location: str | None = None
    dropoff_location: str | None = None
    estimated_distance_km: Decimal | None = None
    tour_type: TourType | None = None
    seasonal_multiplier: Decimal
    price_per_day_at_booking: Decimal
    vehicle_base_amount: Decimal
    needs_driver: bool
    number_of_drivers: int
    base_driver_rate: Decimal | None = None
    distance_charge: Decimal
    terrain_charge: Decimal
    driver_total_amount: Decimal | None = None
    applied_discounts: list[AppliedDiscountRead] = Field(default_factory=list)
    discount_amount: Decimal
    coupon_code: str | None = None
    gross_amount: Decimal
    total_price: Decimal
    advance_amount: Decimal
    remaining_amount: Decimal
    special_requests: str | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    cancellation_reason: str | None = None
    refund_amount: Decimal | None = None
    refund_percentage: int | None = None
    refund_policy: str | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RefundDecisionRead(BaseModel):
    """Refund terms for cancelling a booking now."""

    refund_percentage: int
    refund_amount: Decimal
    reason: str
    policy: str
    days_until_start: int


class VehicleBookingCancelRead(BaseModel):
    """Cancelled booking plus the refund that was applied."""

    booking: VehicleBookingRead
    refund: RefundDecisionRead


class VehicleBookingPage(BaseModel):
    """Paginated booking listing."""

    items: list[VehicleBookingRead]
    total: int
    page: int
    limit: int
    total_pages: int
