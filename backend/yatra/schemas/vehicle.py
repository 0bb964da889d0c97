"""Vehicle schemas."""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from yatra.models.vehicle import VehicleStatus, VehicleType


class VehicleBase(BaseModel):
    """Shared vehicle fields."""

    vehicle_type: VehicleType
    brand: str = Field(min_length=1, max_length=120)
    model: str | None = None
    seat_capacity: int | None = Field(default=None, gt=0)
    price_per_day: Decimal = Field(gt=Decimal("0"))
    total_quantity: int = Field(default=1, gt=0)
    status: VehicleStatus = VehicleStatus.AVAILABLE
    city: str = Field(min_length=1, max_length=120)
    region: str | None = None
    description: str | None = None


class VehicleCreate(VehicleBase):
    """Payload for adding a vehicle to the fleet."""


class VehicleUpdate(BaseModel):
    """Mutable vehicle fields."""

    vehicle_type: VehicleType | None = None
    brand: str | None = Field(default=None, min_length=1, max_length=120)
    model: str | None = None
    seat_capacity: int | None = Field(default=None, gt=0)
    price_per_day: Decimal | None = Field(default=None, gt=Decimal("0"))
    total_quantity: int | None = Field(default=None, gt=0)
    status: VehicleStatus | None = None
    city: str | None = Field(default=None, min_length=1, max_length=120)
    region: str | None = None
    description: str | None = None


class VehicleRead(VehicleBase):
    """Serialized vehicle."""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
