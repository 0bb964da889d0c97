"""Pricing configuration models.

Seasonal multipliers, driver rates and discounts share one ``pricing_configs``
table. Each kind is mapped as its own class through single-table
inheritance on the ``type`` discriminator, so a seasonal row never exposes
discount columns and vice versa.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Enum, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from yatra.db.base import Base
from yatra.models.mixins import TimestampMixin
from yatra.models.vehicle import TourType

JSONB_TYPE = JSONB().with_variant(JSON(), "sqlite")


class PricingConfigType(str, enum.Enum):
    """Discriminator for the pricing configuration variants."""

    SEASONAL = "SEASONAL"
    DRIVER = "DRIVER"
    DISCOUNT = "DISCOUNT"


class DiscountValueType(str, enum.Enum):
    """How a discount value is interpreted."""

    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


class DiscountSource(str, enum.Enum):
    """Where an applied discount came from."""

    COUPON = "COUPON"
    LONG_TERM = "LONG_TERM"


class PricingConfig(TimestampMixin, Base):
    """Administrator-maintained pricing configuration."""

    __tablename__ = "pricing_configs"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    config_type: Mapped[PricingConfigType] = mapped_column(
        "type", Enum(PricingConfigType), nullable=False
    )
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1024))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    valid_from: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    valid_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    vehicle_types: Mapped[list[str]] = mapped_column(
        JSONB_TYPE, default=list, nullable=False
    )
    regions: Mapped[list[str]] = mapped_column(JSONB_TYPE, default=list, nullable=False)
    tour_type: Mapped[TourType | None] = mapped_column(Enum(TourType))

    __mapper_args__ = {"polymorphic_on": "config_type"}

    def applies_to_vehicle_type(self, vehicle_type: str) -> bool:
        """Empty scope is a wildcard."""
        return not self.vehicle_types or vehicle_type in self.vehicle_types

    def applies_to_region(self, region: str | None) -> bool:
        return not self.regions or region in self.regions


class SeasonalPricing(PricingConfig):
    """Multiplier applied to the daily vehicle rate during a date window."""

    price_multiplier: Mapped[Decimal | None] = mapped_column(Numeric(6, 3))

    __mapper_args__ = {"polymorphic_identity": PricingConfigType.SEASONAL}


class DriverPricing(PricingConfig):
    """Driver service rates, optionally scoped to a tour type."""

    base_driver_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    price_per_km: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    terrain_multiplier: Mapped[Decimal | None] = mapped_column(Numeric(6, 3))

    __mapper_args__ = {"polymorphic_identity": PricingConfigType.DRIVER}


class DiscountPricing(PricingConfig):
    """Coupon codes and long-term rental discounts."""

    code: Mapped[str | None] = mapped_column(String(64), index=True)
    discount_source: Mapped[DiscountSource | None] = mapped_column(
        Enum(DiscountSource)
    )
    discount_value: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    discount_value_type: Mapped[DiscountValueType | None] = mapped_column(
        Enum(DiscountValueType)
    )
    max_discount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    min_booking_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    min_days: Mapped[int | None] = mapped_column(Integer)
    usage_limit: Mapped[int | None] = mapped_column(Integer)
    usage_count: Mapped[int | None] = mapped_column(Integer, default=0)
    per_user_limit: Mapped[int | None] = mapped_column(Integer)

    __mapper_args__ = {"polymorphic_identity": PricingConfigType.DISCOUNT}
