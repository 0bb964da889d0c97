"""Vehicle booking lifecycle: create, reprice, cancel and administer."""
from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from yatra.core.clock import coerce_utc, utcnow
from yatra.core.config import get_settings
from yatra.models.pricing import DiscountPricing, PricingConfigType
from yatra.models.user import User
from yatra.models.vehicle import TourType, Vehicle, VehicleStatus
from yatra.models.vehicle_booking import RentalStatus, VehicleBooking
from yatra.services import booking_pricing_service, refund_service
from yatra.services.discount_service import CouponUsageLimitReached
from yatra.services.refund_service import RefundDecision
from yatra.utils.booking_code import generate_booking_code

logger = logging.getLogger(__name__)

_ALLOWED_STATUS_TRANSITIONS: dict[RentalStatus, set[RentalStatus]] = {
    RentalStatus.PENDING: {RentalStatus.CONFIRMED, RentalStatus.CANCELLED},
    RentalStatus.CONFIRMED: {RentalStatus.ACTIVE, RentalStatus.CANCELLED},
    RentalStatus.ACTIVE: {RentalStatus.COMPLETED},
    RentalStatus.COMPLETED: set(),
    RentalStatus.CANCELLED: set(),
}

_HOLDING_STATUSES = {
    RentalStatus.PENDING,
    RentalStatus.CONFIRMED,
    RentalStatus.ACTIVE,
}

_REPRICING_FIELDS = {
    "start_date",
    "end_date",
    "number_of_vehicles",
    "needs_driver",
    "number_of_drivers",
    "tour_type",
    "estimated_distance_km",
    "coupon_code",
    "advance_amount",
}


def _base_booking_query():
    return select(VehicleBooking).options(selectinload(VehicleBooking.vehicle))


async def get_booking(
    session: AsyncSession, booking_id: uuid.UUID
) -> VehicleBooking | None:
    stmt = _base_booking_query().where(VehicleBooking.id == booking_id)
    result = await session.execute(stmt)
    return result.scalars().one_or_none()


async def get_user_booking(
    session: AsyncSession, *, user_id: uuid.UUID, booking_id: uuid.UUID
) -> VehicleBooking | None:
    stmt = _base_booking_query().where(
        VehicleBooking.id == booking_id, VehicleBooking.user_id == user_id
    )
    result = await session.execute(stmt)
    return result.scalars().one_or_none()


async def list_bookings(
    session: AsyncSession,
    *,
    user_id: uuid.UUID | None = None,
    status: RentalStatus | None = None,
    tour_type: TourType | None = None,
    page: int = 1,
    limit: int = 10,
    newest_first: bool = True,
) -> tuple[Sequence[VehicleBooking], int]:
    """Return one page of bookings and the total matching count."""
    filters = []
    if user_id is not None:
        filters.append(VehicleBooking.user_id == user_id)
    if status is not None:
        filters.append(VehicleBooking.status == status)
    if tour_type is not None:
        filters.append(VehicleBooking.tour_type == tour_type)

    order = (
        VehicleBooking.created_at.desc() if newest_first else VehicleBooking.created_at.asc()
    )
    stmt = (
        _base_booking_query()
        .where(*filters)
        .order_by(order)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    items = (await session.execute(stmt)).scalars().all()
    total = (
        await session.execute(
            select(func.count()).select_from(VehicleBooking).where(*filters)
        )
    ).scalar_one()
    return items, total


async def list_user_bookings(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    status: RentalStatus | None = None,
    tour_type: TourType | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[Sequence[VehicleBooking], int]:
    return await list_bookings(
        session,
        user_id=user_id,
        status=status,
        tour_type=tour_type,
        page=page,
        limit=limit,
    )


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


async def _vehicles_held(
    session: AsyncSession,
    *,
    vehicle_id: uuid.UUID,
    start_date: datetime,
    end_date: datetime,
    exclude_booking_id: uuid.UUID | None = None,
) -> int:
    stmt = select(func.coalesce(func.sum(VehicleBooking.number_of_vehicles), 0)).where(
        VehicleBooking.vehicle_id == vehicle_id,
        VehicleBooking.status.in_(_HOLDING_STATUSES),
        VehicleBooking.start_date <= end_date,
        VehicleBooking.end_date >= start_date,
    )
    if exclude_booking_id is not None:
        stmt = stmt.where(VehicleBooking.id != exclude_booking_id)
    return int((await session.execute(stmt)).scalar_one())


async def _ensure_vehicle_available(
    session: AsyncSession,
    *,
    vehicle: Vehicle,
    start_date: datetime,
    end_date: datetime,
    number_of_vehicles: int,
    exclude_booking_id: uuid.UUID | None = None,
) -> None:
    if vehicle.status != VehicleStatus.AVAILABLE:
        raise ValueError("Vehicle is not available")
    held = await _vehicles_held(
        session,
        vehicle_id=vehicle.id,
        start_date=start_date,
        end_date=end_date,
        exclude_booking_id=exclude_booking_id,
    )
    available = max(vehicle.total_quantity - held, 0)
    if available < number_of_vehicles:
        raise ValueError(
            "Insufficient vehicles available for selected dates. "
            f"Only {available} vehicle(s) available"
        )


async def _consume_coupon(session: AsyncSession, code: str) -> None:
    """Increment the coupon counter only while it is below its limit.

    The check and the increment happen in one UPDATE so concurrent bookings
    cannot both take the last use.
    """
    current = func.coalesce(DiscountPricing.usage_count, 0)
    stmt = (
        update(DiscountPricing)
        .where(
            DiscountPricing.config_type == PricingConfigType.DISCOUNT,
            DiscountPricing.code == code,
            DiscountPricing.is_active.is_(True),
            or_(
                DiscountPricing.usage_limit.is_(None),
                current < DiscountPricing.usage_limit,
            ),
        )
        .values(usage_count=current + 1)
        .execution_options(synchronize_session="fetch")
    )
    result = await session.execute(stmt)
    if result.rowcount == 0:
        raise CouponUsageLimitReached()
    logger.info("Coupon %s consumed", code)


async def _release_coupon(session: AsyncSession, code: str) -> None:
    stmt = (
        update(DiscountPricing)
        .where(
            DiscountPricing.config_type == PricingConfigType.DISCOUNT,
            DiscountPricing.code == code,
            DiscountPricing.usage_count > 0,
        )
        .values(usage_count=DiscountPricing.usage_count - 1)
        .execution_options(synchronize_session="fetch")
    )
    await session.execute(stmt)


async def _commit_or_rollback(session: AsyncSession) -> None:
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise


async def create_booking(
    session: AsyncSession,
    *,
    user: User,
    vehicle: Vehicle,
    start_date: datetime,
    end_date: datetime,
    number_of_vehicles: int = 1,
    needs_driver: bool = False,
    number_of_drivers: int = 0,
    tour_type: TourType | None = None,
    estimated_distance_km: Decimal | None = None,
    coupon_code: str | None = None,
    advance_amount: Decimal = Decimal("0"),
    destination: str | None = None,
    pickup_location: str | None = None,
    dropoff_location: str | None = None,
    special_requests: str | None = None,
    now: datetime | None = None,
) -> VehicleBooking:
    """Price and persist a booking, consuming the coupon atomically."""
    start_date = coerce_utc(start_date)
    end_date = coerce_utc(end_date)
    coupon_code = coupon_code or None
    if not needs_driver:
        number_of_drivers = 0

    await _ensure_vehicle_available(
        session,
        vehicle=vehicle,
        start_date=start_date,
        end_date=end_date,
        number_of_vehicles=number_of_vehicles,
    )

    breakdown = await booking_pricing_service.price_booking(
        session,
        vehicle=vehicle,
        start_date=start_date,
        end_date=end_date,
        number_of_vehicles=number_of_vehicles,
        user_id=user.id,
        needs_driver=needs_driver,
        number_of_drivers=number_of_drivers,
        tour_type=tour_type,
        estimated_distance_km=estimated_distance_km,
        coupon_code=coupon_code,
        advance_amount=advance_amount,
        now=now,
    )

    booking = VehicleBooking(
        booking_code=generate_booking_code(get_settings().booking_code_prefix),
        user_id=user.id,
        vehicle_id=vehicle.id,
        status=RentalStatus.PENDING,
        start_date=start_date,
        end_date=end_date,
        number_of_vehicles=number_of_vehicles,
        needs_driver=needs_driver,
        number_of_drivers=number_of_drivers,
        tour_type=tour_type,
        estimated_distance_km=estimated_distance_km,
        destination=destination,
        pickup_location=pickup_location,
        dropoff_location=dropoff_location,
        special_requests=special_requests,
        **breakdown.booking_fields(),
    )
    session.add(booking)
    try:
        await session.flush()
        if coupon_code:
            await _consume_coupon(session, coupon_code)
    except (IntegrityError, CouponUsageLimitReached):
        await session.rollback()
        raise
    await _commit_or_rollback(session)

    logger.info(
        "Vehicle booking %s created for user %s (total %s)",
        booking.booking_code,
        user.id,
        booking.total_price,
    )
    return await get_booking(session, booking.id) or booking


def _ensure_editable(booking: VehicleBooking) -> None:
    if booking.status == RentalStatus.CANCELLED:
        raise ValueError("Booking is already cancelled. Cannot update cancelled booking")
    if booking.status in {RentalStatus.CONFIRMED, RentalStatus.COMPLETED}:
        raise ValueError("Cannot update confirmed or completed bookings")
    if booking.status != RentalStatus.PENDING:
        raise ValueError("Only pending bookings can be updated")


async def update_booking(
    session: AsyncSession,
    *,
    booking: VehicleBooking,
    user: User,
    changes: dict[str, Any],
    now: datetime | None = None,
) -> VehicleBooking:
    """Apply customer edits to a pending booking, repricing when needed."""
    _ensure_editable(booking)

    if not _REPRICING_FIELDS & set(changes):
        for field, value in changes.items():
            setattr(booking, field, value)
        await _commit_or_rollback(session)
        return await get_booking(session, booking.id) or booking

    vehicle = await session.get(Vehicle, booking.vehicle_id)
    if vehicle is None:
        raise ValueError("Vehicle not found")
    start_date = coerce_utc(changes.get("start_date") or booking.start_date)
    end_date = coerce_utc(changes.get("end_date") or booking.end_date)
    number_of_vehicles = changes.get("number_of_vehicles") or booking.number_of_vehicles
    needs_driver = changes.get("needs_driver", booking.needs_driver)
    number_of_drivers = changes.get("number_of_drivers", booking.number_of_drivers)
    if not needs_driver:
        number_of_drivers = 0
    tour_type = changes.get("tour_type", booking.tour_type)
    distance = changes.get("estimated_distance_km", booking.estimated_distance_km)
    advance_amount = changes.get("advance_amount", booking.advance_amount)
    old_coupon = booking.coupon_code
    new_coupon = (
        (changes["coupon_code"] or None) if "coupon_code" in changes else old_coupon
    )

    await _ensure_vehicle_available(
        session,
        vehicle=vehicle,
        start_date=start_date,
        end_date=end_date,
        number_of_vehicles=number_of_vehicles,
        exclude_booking_id=booking.id,
    )

    breakdown = await booking_pricing_service.price_booking(
        session,
        vehicle=vehicle,
        start_date=start_date,
        end_date=end_date,
        number_of_vehicles=number_of_vehicles,
        user_id=user.id,
        needs_driver=needs_driver,
        number_of_drivers=number_of_drivers,
        tour_type=tour_type,
        estimated_distance_km=distance,
        coupon_code=new_coupon,
        advance_amount=advance_amount,
        now=now,
        exclude_booking_id=booking.id,
        coupon_held=new_coupon is not None and new_coupon == old_coupon,
    )

    for field, value in changes.items():
        if field not in _REPRICING_FIELDS:
            setattr(booking, field, value)
    booking.start_date = start_date
    booking.end_date = end_date
    booking.number_of_vehicles = number_of_vehicles
    booking.needs_driver = needs_driver
    booking.number_of_drivers = number_of_drivers
    booking.tour_type = tour_type
    booking.estimated_distance_km = distance
    for field, value in breakdown.booking_fields().items():
        setattr(booking, field, value)

    try:
        if new_coupon != old_coupon:
            if old_coupon:
                await _release_coupon(session, old_coupon)
            if new_coupon:
                await _consume_coupon(session, new_coupon)
    except CouponUsageLimitReached:
        await session.rollback()
        raise
    await _commit_or_rollback(session)
    return await get_booking(session, booking.id) or booking


def preview_refund(
    booking: VehicleBooking, *, now: datetime | None = None
) -> RefundDecision:
    """Refund the customer would receive if they cancelled now."""
    if booking.status in {RentalStatus.CANCELLED, RentalStatus.COMPLETED}:
        raise ValueError(f"Booking is {booking.status.value.lower()}")
    return refund_service.compute_refund(
        start_date=booking.start_date, total_price=booking.total_price, now=now
    )


async def cancel_booking(
    session: AsyncSession,
    *,
    booking: VehicleBooking,
    cancelled_by: User,
    reason: str | None = None,
    now: datetime | None = None,
) -> tuple[VehicleBooking, RefundDecision]:
    """Cancel a customer's booking and record the refund owed."""
    if booking.status == RentalStatus.CANCELLED:
        raise ValueError("Booking already cancelled")
    if booking.status == RentalStatus.COMPLETED:
        raise ValueError("Cannot cancel completed booking")

    now = coerce_utc(now or utcnow())
    decision = refund_service.compute_refund(
        start_date=booking.start_date, total_price=booking.total_price, now=now
    )
    booking.status = RentalStatus.CANCELLED
    booking.cancelled_at = now
    booking.cancelled_by = cancelled_by.full_name
    booking.cancellation_reason = reason
    booking.refund_amount = decision.refund_amount
    booking.refund_percentage = decision.refund_percentage
    booking.refund_policy = decision.policy.value
    await _commit_or_rollback(session)

    logger.info(
        "Vehicle booking %s cancelled; refund %s%% (%s)",
        booking.booking_code,
        decision.refund_percentage,
        decision.refund_amount,
    )
    return booking, decision


async def update_booking_status(
    session: AsyncSession,
    *,
    booking: VehicleBooking,
    status: RentalStatus,
    now: datetime | None = None,
) -> VehicleBooking:
    """Move a booking through its lifecycle (admin action)."""
    if status == booking.status:
        return booking
    allowed = _ALLOWED_STATUS_TRANSITIONS.get(booking.status, set())
    if status not in allowed:
        raise ValueError(
            f"Invalid status transition from {booking.status.value} to {status.value}"
        )
    now = coerce_utc(now or utcnow())
    booking.status = status
    if status == RentalStatus.CANCELLED:
        booking.cancelled_at = now
    elif status == RentalStatus.COMPLETED:
        booking.completed_at = now
    await _commit_or_rollback(session)
    return booking
