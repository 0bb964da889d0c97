"""Pricing schema definitions."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from yatra.core.clock import coerce_utc
from yatra.models.pricing import DiscountSource, DiscountValueType
from yatra.models.vehicle import TourType


class AppliedDiscountRead(BaseModel):
    """Individual discount line within a price breakdown."""

    source: DiscountSource
    value_type: DiscountValueType
    value: Decimal
    amount: Decimal
    code: str | None = None


class BookingPriceRequest(BaseModel):
    """Vehicle rental parameters shared by quoting and booking."""

    vehicle_id: uuid.UUID
    start_date: datetime
    end_date: datetime
    number_of_vehicles: int = Field(default=1, ge=1)
    tour_type: TourType | None = None
    estimated_distance_km: Decimal | None = Field(default=None, ge=Decimal("0"))
    needs_driver: bool = False
    number_of_drivers: int = Field(default=0, ge=0)
    coupon_code: str | None = None
    advance_amount: Decimal = Field(default=Decimal("0"), ge=Decimal("0"))

    @model_validator(mode="after")
    def _check_dates(self) -> "BookingPriceRequest":
        if coerce_utc(self.end_date) <= coerce_utc(self.start_date):
            raise ValueError("end_date must be after start_date")
        return self


class BookingPriceRead(BaseModel):
    """Gross-to-net price breakdown."""

    duration_days: int
    seasonal_multiplier: Decimal
    price_per_day_at_booking: Decimal
    vehicle_base_amount: Decimal
    base_driver_rate: Decimal | None = None
    driver_total_amount: Decimal | None = None
    distance_charge: Decimal
    terrain_charge: Decimal
    applied_discounts: list[AppliedDiscountRead]
    discount_amount: Decimal
    coupon_code: str | None = None
    gross_amount: Decimal
    total_price: Decimal
    advance_amount: Decimal
    remaining_amount: Decimal


class TourQuoteRequest(BaseModel):
    """Input payload for a tour booking quote."""

    tour_id: uuid.UUID | None = None
    price_per_participant: Decimal = Field(gt=Decimal("0"))
    number_of_participants: int = Field(ge=1)
    discount_rate: Decimal = Field(default=Decimal("0"), ge=Decimal("0"), le=Decimal("100"))
    needs_guide: bool = False


class TourQuoteRead(BaseModel):
    """Tour booking price."""

    total_price: Decimal
    discount_price: Decimal
    guide_total_price: Decimal | None = None
