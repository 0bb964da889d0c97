"""Fleet endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.api import deps
from yatra.models.user import User
from yatra.models.vehicle import VehicleStatus, VehicleType
from yatra.schemas.vehicle import VehicleCreate, VehicleRead, VehicleUpdate
from yatra.services import vehicle_service

router = APIRouter()


@router.get("", response_model=list[VehicleRead], summary="List vehicles")
async def list_vehicles(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    vehicle_type: VehicleType | None = None,
    vehicle_status: Annotated[VehicleStatus | None, Query(alias="status")] = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
) -> list[VehicleRead]:
    vehicles = await vehicle_service.list_vehicles(
        session,
        vehicle_type=vehicle_type,
        status=vehicle_status,
        skip=skip,
        limit=limit,
    )
    return [VehicleRead.model_validate(vehicle) for vehicle in vehicles]


@router.get("/{vehicle_id}", response_model=VehicleRead, summary="Get vehicle")
async def get_vehicle(
    vehicle_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> VehicleRead:
    vehicle = await vehicle_service.get_vehicle(session, vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
    return VehicleRead.model_validate(vehicle)


@router.post(
    "",
    response_model=VehicleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create vehicle",
)
async def create_vehicle(
    payload: VehicleCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> VehicleRead:
    vehicle = await vehicle_service.create_vehicle(session, payload)
    return VehicleRead.model_validate(vehicle)


@router.patch("/{vehicle_id}", response_model=VehicleRead, summary="Update vehicle")
async def update_vehicle(
    vehicle_id: uuid.UUID,
    payload: VehicleUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> VehicleRead:
    vehicle = await vehicle_service.get_vehicle(session, vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
    vehicle = await vehicle_service.update_vehicle(session, vehicle, payload)
    return VehicleRead.model_validate(vehicle)
