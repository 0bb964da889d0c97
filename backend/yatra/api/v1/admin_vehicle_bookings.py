"""Administrative vehicle booking endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.api import deps
from yatra.api.rate_limits import client_ip
from yatra.models.user import User
from yatra.models.vehicle import TourType
from yatra.models.vehicle_booking import RentalStatus
from yatra.schemas.vehicle_booking import (
    VehicleBookingPage,
    VehicleBookingRead,
    VehicleBookingStatusUpdate,
)
from yatra.services import audit_service, vehicle_booking_service

router = APIRouter()


@router.get("", response_model=VehicleBookingPage, summary="List all bookings")
async def list_vehicle_bookings(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
    booking_status: Annotated[RentalStatus | None, Query(alias="status")] = None,
    user_id: uuid.UUID | None = None,
    tour_type: TourType | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> VehicleBookingPage:
    items, total = await vehicle_booking_service.list_bookings(
        session,
        user_id=user_id,
        status=booking_status,
        tour_type=tour_type,
        page=page,
        limit=limit,
    )
    return VehicleBookingPage(
        items=[VehicleBookingRead.model_validate(item) for item in items],
        total=total,
        page=page,
        limit=limit,
        total_pages=vehicle_booking_service.total_pages(total, limit),
    )


@router.get("/{booking_id}", response_model=VehicleBookingRead, summary="Get booking")
async def get_vehicle_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> VehicleBookingRead:
    booking = await vehicle_booking_service.get_booking(session, booking_id)
    if booking is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return VehicleBookingRead.model_validate(booking)


@router.patch(
    "/{booking_id}/status",
    response_model=VehicleBookingRead,
    summary="Change booking status",
)
async def update_vehicle_booking_status(
    booking_id: uuid.UUID,
    payload: VehicleBookingStatusUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    admin: Annotated[User, Depends(deps.require_admin)],
    request: Request,
) -> VehicleBookingRead:
    booking = await vehicle_booking_service.get_booking(session, booking_id)
    if booking is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    previous = booking.status
    try:
        booking = await vehicle_booking_service.update_booking_status(
            session, booking=booking, status=payload.status
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    result = VehicleBookingRead.model_validate(booking)
    await audit_service.record_booking_event(
        session,
        booking=booking,
        event_type="vehicle_booking.status_changed",
        actor_id=admin.id,
        description=f"{result.booking_code}: {previous.value} -> {result.status.value}",
        ip_address=client_ip(request),
        extra={"previous_status": previous.value},
    )
    return result
