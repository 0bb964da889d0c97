"""Pricing configuration schemas.

Create payloads are a discriminated union on ``type`` so each variant only
accepts the fields that make sense for it.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from yatra.core.clock import coerce_utc
from yatra.models.pricing import DiscountSource, DiscountValueType, PricingConfigType
from yatra.models.vehicle import TourType, VehicleType


class PricingConfigBase(BaseModel):
    """Fields shared by every pricing configuration."""

    name: str = Field(min_length=1, max_length=160)
    description: str | None = None
    is_active: bool = True
    priority: int = 0
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    vehicle_types: list[VehicleType] = Field(default_factory=list)
    regions: list[str] = Field(default_factory=list)
    tour_type: TourType | None = None

    @model_validator(mode="after")
    def _check_window(self) -> "PricingConfigBase":
        if (
            self.valid_from is not None
            and self.valid_until is not None
            and coerce_utc(self.valid_until) < coerce_utc(self.valid_from)
        ):
            raise ValueError("valid_until must not be before valid_from")
        return self


class SeasonalPricingCreate(PricingConfigBase):
    type: Literal["SEASONAL"]
    price_multiplier: Decimal = Field(gt=Decimal("0"))


class DriverPricingCreate(PricingConfigBase):
    type: Literal["DRIVER"]
    base_driver_rate: Decimal | None = Field(default=None, ge=Decimal("0"))
    price_per_km: Decimal | None = Field(default=None, ge=Decimal("0"))
    terrain_multiplier: Decimal | None = Field(default=None, ge=Decimal("1"))


class DiscountPricingCreate(PricingConfigBase):
    type: Literal["DISCOUNT"]
    code: str | None = Field(default=None, min_length=1, max_length=64)
    discount_source: DiscountSource = DiscountSource.COUPON
    discount_value: Decimal = Field(gt=Decimal("0"))
    discount_value_type: DiscountValueType = DiscountValueType.PERCENTAGE
    max_discount: Decimal | None = Field(default=None, gt=Decimal("0"))
    min_booking_amount: Decimal | None = Field(default=None, ge=Decimal("0"))
    min_days: int | None = Field(default=None, ge=1)
    usage_limit: int | None = Field(default=None, ge=1)
    per_user_limit: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _check_source(self) -> "DiscountPricingCreate":
        if self.discount_source is DiscountSource.COUPON and not self.code:
            raise ValueError("Coupon discounts require a code")
        if self.discount_source is DiscountSource.LONG_TERM and self.min_days is None:
            raise ValueError("Long-term discounts require min_days")
        if (
            self.discount_value_type is DiscountValueType.PERCENTAGE
            and self.discount_value > 100
        ):
            raise ValueError("Percentage discounts cannot exceed 100")
        return self


# request bodies discriminate on ``type``
PricingConfigCreate = Union[SeasonalPricingCreate, DriverPricingCreate, DiscountPricingCreate]


class PricingConfigUpdate(BaseModel):
    """Mutable configuration fields; variant fields must match the stored type."""

    name: str | None = Field(default=None, min_length=1, max_length=160)
    description: str | None = None
    is_active: bool | None = None
    priority: int | None = None
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    vehicle_types: list[VehicleType] | None = None
    regions: list[str] | None = None
    tour_type: TourType | None = None

    price_multiplier: Decimal | None = Field(default=None, gt=Decimal("0"))

    base_driver_rate: Decimal | None = Field(default=None, ge=Decimal("0"))
    price_per_km: Decimal | None = Field(default=None, ge=Decimal("0"))
    terrain_multiplier: Decimal | None = Field(default=None, ge=Decimal("1"))

    code: str | None = Field(default=None, min_length=1, max_length=64)
    discount_value: Decimal | None = Field(default=None, gt=Decimal("0"))
    discount_value_type: DiscountValueType | None = None
    max_discount: Decimal | None = Field(default=None, gt=Decimal("0"))
    min_booking_amount: Decimal | None = Field(default=None, ge=Decimal("0"))
    min_days: int | None = Field(default=None, ge=1)
    usage_limit: int | None = Field(default=None, ge=1)
    per_user_limit: int | None = Field(default=None, ge=1)


class PricingConfigRead(BaseModel):
    """Serialized configuration of any variant."""

    id: uuid.UUID
    type: PricingConfigType = Field(validation_alias="config_type")
    name: str
    description: str | None = None
    is_active: bool
    priority: int
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    vehicle_types: list[str] = Field(default_factory=list)
    regions: list[str] = Field(default_factory=list)
    tour_type: TourType | None = None

    price_multiplier: Decimal | None = None

    base_driver_rate: Decimal | None = None
    price_per_km: Decimal | None = None
    terrain_multiplier: Decimal | None = None

    code: str | None = None
    discount_source: DiscountSource | None = None
    discount_value: Decimal | None = None
    discount_value_type: DiscountValueType | None = None
    max_discount: Decimal | None = None
    min_booking_amount: Decimal | None = None
    min_days: int | None = None
    usage_limit: int | None = None
    usage_count: int | None = None
    per_user_limit: int | None = None

    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
