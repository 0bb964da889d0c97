"""Vehicle rental booking model."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Boolean,
    Index,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from yatra.db.base import Base
from yatra.models.mixins import TimestampMixin
from yatra.models.pricing import JSONB_TYPE
from yatra.models.vehicle import TourType

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from yatra.models.user import User
    from yatra.models.vehicle import Vehicle


class RentalStatus(str, enum.Enum):
    """Lifecycle states for vehicle bookings."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class VehicleBooking(TimestampMixin, Base):
    """A priced rental of one or more vehicles of the same model."""

    __tablename__ = "vehicle_bookings"
    __table_args__ = (
        Index("ix_vehicle_bookings_vehicle_dates", "vehicle_id", "start_date", "end_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    booking_code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    vehicle_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("vehicles.id", ondelete="RESTRICT"), nullable=False
    )
    status: Mapped[RentalStatus] = mapped_column(
        Enum(RentalStatus), default=RentalStatus.PENDING, nullable=False
    )

    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    number_of_vehicles: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    destination: Mapped[str | None] = mapped_column(String(255))
    pickup_location: Mapped[str | None] = mapped_column(String(255))
    dropoff_location: Mapped[str | None] = mapped_column(String(255))
    estimated_distance_km: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    tour_type: Mapped[TourType | None] = mapped_column(Enum(TourType))

    seasonal_multiplier: Mapped[Decimal] = mapped_column(
        Numeric(6, 3), default=Decimal("1"), nullable=False
    )
    price_per_day_at_booking: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    vehicle_base_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    needs_driver: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    number_of_drivers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    base_driver_rate: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    distance_charge: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    terrain_charge: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    driver_total_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    applied_discounts: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB_TYPE, default=list, nullable=False
    )
    discount_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    coupon_code: Mapped[str | None] = mapped_column(String(64), index=True)

    gross_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    advance_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    remaining_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    special_requests: Mapped[str | None] = mapped_column(String(2048))

    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cancelled_by: Mapped[str | None] = mapped_column(String(240))
    cancellation_reason: Mapped[str | None] = mapped_column(String(1024))
    refund_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    refund_percentage: Mapped[int | None] = mapped_column(Integer)
    refund_policy: Mapped[str | None] = mapped_column(String(64))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    user: Mapped["User"] = relationship("User", back_populates="vehicle_bookings")
    vehicle: Mapped["Vehicle"] = relationship("Vehicle", back_populates="bookings")
