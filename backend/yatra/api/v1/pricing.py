"""Price quote endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.api import deps
from yatra.models.user import User
from yatra.schemas.pricing import (
    BookingPriceRead,
    BookingPriceRequest,
    TourQuoteRead,
    TourQuoteRequest,
)
from yatra.services import booking_pricing_service, tour_pricing_service, vehicle_service

router = APIRouter()


@router.post("/quote", response_model=BookingPriceRead, summary="Quote a vehicle booking")
async def quote_vehicle_booking(
    payload: BookingPriceRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_active_user)],
) -> BookingPriceRead:
    """Price a booking without persisting it or consuming the coupon."""
    vehicle = await vehicle_service.get_vehicle(session, payload.vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vehicle not found")
    try:
        breakdown = await booking_pricing_service.price_booking(
            session,
            vehicle=vehicle,
            start_date=payload.start_date,
            end_date=payload.end_date,
            number_of_vehicles=payload.number_of_vehicles,
            user_id=current_user.id,
            needs_driver=payload.needs_driver,
            number_of_drivers=payload.number_of_drivers,
            tour_type=payload.tour_type,
            estimated_distance_km=payload.estimated_distance_km,
            coupon_code=payload.coupon_code,
            advance_amount=payload.advance_amount,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return BookingPriceRead.model_validate(breakdown.to_dict())


@router.post("/tour-quote", response_model=TourQuoteRead, summary="Quote a tour booking")
async def quote_tour_booking(
    payload: TourQuoteRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> TourQuoteRead:
    try:
        quote = await tour_pricing_service.quote_tour(
            session,
            tour_id=payload.tour_id,
            price_per_participant=payload.price_per_participant,
            number_of_participants=payload.number_of_participants,
            discount_rate=payload.discount_rate,
            needs_guide=payload.needs_guide,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return TourQuoteRead.model_validate(quote.to_dict())
