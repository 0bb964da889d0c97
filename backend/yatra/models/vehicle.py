"""Rental fleet models."""
from __future__ import annotations

import enum
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Enum, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from yatra.db.base import Base
from yatra.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from yatra.models.vehicle_booking import VehicleBooking


class VehicleType(str, enum.Enum):
    """Vehicle categories that pricing rules can target."""

    CAR = "CAR"
    SUV = "SUV"
    JEEP = "JEEP"
    VAN = "VAN"
    BUS = "BUS"
    MOTORBIKE = "MOTORBIKE"


class VehicleStatus(str, enum.Enum):
    """Operational availability of a fleet entry."""

    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"
    MAINTENANCE = "MAINTENANCE"
    INACTIVE = "INACTIVE"


class TourType(str, enum.Enum):
    """Kinds of trips a rental can be booked for."""

    CITY = "CITY"
    HIGHWAY = "HIGHWAY"
    MOUNTAIN = "MOUNTAIN"
    OFF_ROAD = "OFF_ROAD"


class Vehicle(TimestampMixin, Base):
    """A rentable vehicle model with a pooled quantity."""

    __tablename__ = "vehicles"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    vehicle_type: Mapped[VehicleType] = mapped_column(Enum(VehicleType), nullable=False)
    brand: Mapped[str] = mapped_column(String(120), nullable=False)
    model: Mapped[str | None] = mapped_column(String(120))
    seat_capacity: Mapped[int | None] = mapped_column(Integer)
    price_per_day: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    status: Mapped[VehicleStatus] = mapped_column(
        Enum(VehicleStatus), default=VehicleStatus.AVAILABLE, nullable=False
    )
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    region: Mapped[str | None] = mapped_column(String(120))
    description: Mapped[str | None] = mapped_column(String(2048))

    bookings: Mapped[list["VehicleBooking"]] = relationship(
        "VehicleBooking", back_populates="vehicle"
    )

    @property
    def pricing_region(self) -> str:
        """Region used to scope seasonal pricing; falls back to the city."""
        return self.region or self.city
