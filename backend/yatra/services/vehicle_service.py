"""Fleet management helpers."""
from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.models.vehicle import Vehicle, VehicleStatus, VehicleType
from yatra.schemas.vehicle import VehicleCreate, VehicleUpdate


async def list_vehicles(
    session: AsyncSession,
    *,
    vehicle_type: VehicleType | None = None,
    status: VehicleStatus | None = None,
    skip: int = 0,
    limit: int = 50,
) -> Sequence[Vehicle]:
    stmt = select(Vehicle).order_by(Vehicle.created_at.desc())
    if vehicle_type is not None:
        stmt = stmt.where(Vehicle.vehicle_type == vehicle_type)
    if status is not None:
        stmt = stmt.where(Vehicle.status == status)
    result = await session.execute(stmt.offset(skip).limit(limit))
    return result.scalars().all()


async def get_vehicle(session: AsyncSession, vehicle_id: uuid.UUID) -> Vehicle | None:
    return await session.get(Vehicle, vehicle_id)


async def create_vehicle(session: AsyncSession, payload: VehicleCreate) -> Vehicle:
    vehicle = Vehicle(**payload.model_dump())
    session.add(vehicle)
    await session.commit()
    await session.refresh(vehicle)
    return vehicle


async def update_vehicle(
    session: AsyncSession, vehicle: Vehicle, payload: VehicleUpdate
) -> Vehicle:
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(vehicle, field, value)
    await session.commit()
    await session.refresh(vehicle)
    return vehicle
