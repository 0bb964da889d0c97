"""Customer vehicle booking endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.api import deps
from yatra.api.rate_limits import DEFAULT_RATE_DEP, client_ip
from yatra.models.user import User
from yatra.models.vehicle import TourType
from yatra.models.vehicle_booking import RentalStatus, VehicleBooking
from yatra.schemas.vehicle_booking import (
    RefundDecisionRead,
    VehicleBookingCancel,
    VehicleBookingCancelRead,
    VehicleBookingCreate,
    VehicleBookingPage,
    VehicleBookingRead,
    VehicleBookingUpdate,
)
from yatra.services import audit_service, vehicle_booking_service, vehicle_service

router = APIRouter()


async def _get_owned_booking(
    session: AsyncSession, user: User, booking_id: uuid.UUID
) -> VehicleBooking:
    booking = await vehicle_booking_service.get_user_booking(
        session, user_id=user.id, booking_id=booking_id
    )
    if booking is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


@router.post(
    "",
    response_model=VehicleBookingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Book vehicles",
    dependencies=[DEFAULT_RATE_DEP],
)
async def create_vehicle_booking(
    payload: VehicleBookingCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    request: Request,
) -> VehicleBookingRead:
    vehicle = await vehicle_service.get_vehicle(session, payload.vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
    try:
        booking = await vehicle_booking_service.create_booking(
            session,
            user=current_user,
            vehicle=vehicle,
            **payload.model_dump(exclude={"vehicle_id"}),
        )
    except (ValueError, IntegrityError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    result = VehicleBookingRead.model_validate(booking)
    await audit_service.record_booking_event(
        session,
        booking=booking,
        event_type="vehicle_booking.created",
        actor_id=current_user.id,
        description=f"Vehicle booking {result.booking_code} created",
        ip_address=client_ip(request),
    )
    return result


@router.get("", response_model=VehicleBookingPage, summary="List my bookings")
async def list_my_vehicle_bookings(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    booking_status: Annotated[RentalStatus | None, Query(alias="status")] = None,
    tour_type: TourType | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> VehicleBookingPage:
    items, total = await vehicle_booking_service.list_user_bookings(
        session,
        user_id=current_user.id,
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


@router.get("/{booking_id}", response_model=VehicleBookingRead, summary="Get my booking")
async def get_my_vehicle_booking(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> VehicleBookingRead:
    booking = await _get_owned_booking(session, current_user, booking_id)
    return VehicleBookingRead.model_validate(booking)


@router.patch(
    "/{booking_id}", response_model=VehicleBookingRead, summary="Update pending booking"
)
async def update_my_vehicle_booking(
    booking_id: uuid.UUID,
    payload: VehicleBookingUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    request: Request,
) -> VehicleBookingRead:
    booking = await _get_owned_booking(session, current_user, booking_id)
    changes = payload.model_dump(exclude_unset=True)
    try:
        booking = await vehicle_booking_service.update_booking(
            session, booking=booking, user=current_user, changes=changes
        )
    except (ValueError, IntegrityError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    result = VehicleBookingRead.model_validate(booking)
    await audit_service.record_booking_event(
        session,
        booking=booking,
        event_type="vehicle_booking.updated",
        actor_id=current_user.id,
        description=f"Vehicle booking {result.booking_code} updated",
        ip_address=client_ip(request),
        extra={"changed_fields": sorted(changes)},
    )
    return result


@router.get(
    "/{booking_id}/refund-preview",
    response_model=RefundDecisionRead,
    summary="Preview cancellation refund",
)
async def preview_vehicle_booking_refund(
    booking_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> RefundDecisionRead:
    booking = await _get_owned_booking(session, current_user, booking_id)
    try:
        decision = vehicle_booking_service.preview_refund(booking)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return RefundDecisionRead.model_validate(decision.to_dict())


@router.post(
    "/{booking_id}/cancel",
    response_model=VehicleBookingCancelRead,
    summary="Cancel booking",
)
async def cancel_my_vehicle_booking(
    booking_id: uuid.UUID,
    payload: VehicleBookingCancel,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
    request: Request,
) -> VehicleBookingCancelRead:
    booking = await _get_owned_booking(session, current_user, booking_id)
    try:
        booking, decision = await vehicle_booking_service.cancel_booking(
            session,
            booking=booking,
            cancelled_by=current_user,
            reason=payload.cancellation_reason,
        )
    except (ValueError, IntegrityError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    result = VehicleBookingCancelRead(
        booking=VehicleBookingRead.model_validate(booking),
        refund=RefundDecisionRead.model_validate(decision.to_dict()),
    )
    await audit_service.record_booking_event(
        session,
        booking=booking,
        event_type="vehicle_booking.cancelled",
        actor_id=current_user.id,
        description=f"Vehicle booking {result.booking.booking_code} cancelled",
        ip_address=client_ip(request),
        extra={"refund": decision.to_dict()},
    )
    return result
