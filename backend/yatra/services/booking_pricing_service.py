"""Gross-to-net pricing for vehicle bookings."""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from yatra.core.clock import coerce_utc
from yatra.core.money import ZERO, money_str, to_decimal, to_money
from yatra.models.vehicle import TourType, Vehicle
from yatra.services import discount_service, driver_pricing_service, rate_service
from yatra.services.discount_service import AppliedDiscount


@dataclass(slots=True)
class BookingPriceBreakdown:
    """Priced booking, flattened onto the booking row when persisted."""

    duration_days: int
    seasonal_multiplier: Decimal
    price_per_day_at_booking: Decimal
    vehicle_base_amount: Decimal
    base_driver_rate: Decimal | None
    driver_total_amount: Decimal | None
    distance_charge: Decimal
    terrain_charge: Decimal
    gross_amount: Decimal
    discount_amount: Decimal
    total_price: Decimal
    advance_amount: Decimal
    remaining_amount: Decimal
    coupon_code: str | None = None
    applied_discounts: list[AppliedDiscount] = field(default_factory=list)

    def booking_fields(self) -> dict[str, Any]:
        """Column values for a :class:`VehicleBooking`."""
        return {
            "duration_days": self.duration_days,
            "seasonal_multiplier": self.seasonal_multiplier,
            "price_per_day_at_booking": self.price_per_day_at_booking,
            "vehicle_base_amount": self.vehicle_base_amount,
            "base_driver_rate": self.base_driver_rate,
            "driver_total_amount": self.driver_total_amount,
            "distance_charge": self.distance_charge,
            "terrain_charge": self.terrain_charge,
            "applied_discounts": [item.to_dict() for item in self.applied_discounts],
            "discount_amount": self.discount_amount,
            "coupon_code": self.coupon_code,
            "gross_amount": self.gross_amount,
            "total_price": self.total_price,
            "advance_amount": self.advance_amount,
            "remaining_amount": self.remaining_amount,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize the breakdown to plain types for responses."""

        def _opt(value: Decimal | None) -> str | None:
            return None if value is None else money_str(value)

        return {
            "duration_days": self.duration_days,
            "seasonal_multiplier": str(self.seasonal_multiplier),
            "price_per_day_at_booking": money_str(self.price_per_day_at_booking),
            "vehicle_base_amount": money_str(self.vehicle_base_amount),
            "base_driver_rate": _opt(self.base_driver_rate),
            "driver_total_amount": _opt(self.driver_total_amount),
            "distance_charge": money_str(self.distance_charge),
            "terrain_charge": money_str(self.terrain_charge),
            "applied_discounts": [item.to_dict() for item in self.applied_discounts],
            "discount_amount": money_str(self.discount_amount),
            "coupon_code": self.coupon_code,
            "gross_amount": money_str(self.gross_amount),
            "total_price": money_str(self.total_price),
            "advance_amount": money_str(self.advance_amount),
            "remaining_amount": money_str(self.remaining_amount),
        }


def rental_duration_days(start_date: datetime, end_date: datetime) -> int:
    """Whole rental days, rounding any partial day up."""
    span = coerce_utc(end_date) - coerce_utc(start_date)
    if span <= timedelta(0):
        raise ValueError("Booking end date must be after start date")
    return math.ceil(span / timedelta(days=1))


def _gross_amounts(
    price_per_day: Decimal,
    seasonal_multiplier: Decimal,
    duration_days: int,
    number_of_vehicles: int,
    driver_cost: driver_pricing_service.DriverCost | None,
) -> tuple[Decimal, Decimal, Decimal]:
    adjusted_price = to_decimal(price_per_day) * to_decimal(seasonal_multiplier)
    vehicle_base_amount = to_money(adjusted_price * duration_days * number_of_vehicles)
    gross_amount = vehicle_base_amount
    if driver_cost is not None:
        gross_amount += driver_cost.total
    return adjusted_price, vehicle_base_amount, to_money(gross_amount)


def assemble_breakdown(
    *,
    duration_days: int,
    seasonal_multiplier: Decimal,
    price_per_day: Decimal,
    number_of_vehicles: int,
    driver_cost: driver_pricing_service.DriverCost | None,
    discounts: discount_service.DiscountResult,
    advance_amount: Decimal,
    coupon_code: str | None,
) -> BookingPriceBreakdown:
    """Combine the priced components into the final totals."""
    adjusted_price, vehicle_base_amount, gross_amount = _gross_amounts(
        price_per_day, seasonal_multiplier, duration_days, number_of_vehicles, driver_cost
    )

    total_price = max(ZERO, to_money(gross_amount - discounts.total_discount))
    advance_amount = to_money(advance_amount)
    return BookingPriceBreakdown(
        duration_days=duration_days,
        seasonal_multiplier=to_decimal(seasonal_multiplier),
        price_per_day_at_booking=to_money(adjusted_price),
        vehicle_base_amount=vehicle_base_amount,
        base_driver_rate=driver_cost.base_rate if driver_cost else None,
        driver_total_amount=driver_cost.total if driver_cost else None,
        distance_charge=driver_cost.distance_charge if driver_cost else ZERO,
        terrain_charge=driver_cost.terrain_charge if driver_cost else ZERO,
        gross_amount=gross_amount,
        discount_amount=discounts.total_discount,
        total_price=total_price,
        advance_amount=advance_amount,
        remaining_amount=total_price - advance_amount,
        coupon_code=coupon_code or None,
        applied_discounts=list(discounts.discounts),
    )


async def price_booking(
    session: AsyncSession,
    *,
    vehicle: Vehicle,
    start_date: datetime,
    end_date: datetime,
    number_of_vehicles: int,
    user_id: uuid.UUID,
    needs_driver: bool = False,
    number_of_drivers: int = 0,
    tour_type: TourType | None = None,
    estimated_distance_km: Decimal | None = None,
    coupon_code: str | None = None,
    advance_amount: Decimal = ZERO,
    now: datetime | None = None,
    exclude_booking_id: uuid.UUID | None = None,
    coupon_held: bool = False,
) -> BookingPriceBreakdown:
    """Price a booking request end to end.

    Coupon rejections propagate as :class:`CouponError`; callers must not
    persist anything in that case.
    """
    if number_of_vehicles < 1:
        raise ValueError("At least 1 vehicle required")
    duration_days = rental_duration_days(start_date, end_date)

    multiplier = await rate_service.resolve_seasonal_multiplier(
        session,
        start_date=coerce_utc(start_date),
        end_date=coerce_utc(end_date),
        vehicle_type=vehicle.vehicle_type,
        region=vehicle.pricing_region,
    )

    driver_cost = None
    if needs_driver and number_of_drivers > 0:
        driver_cost = await driver_pricing_service.compute_driver_cost(
            session,
            tour_type=tour_type,
            duration_days=duration_days,
            number_of_drivers=number_of_drivers,
            estimated_distance_km=estimated_distance_km,
        )

    _, _, gross_amount = _gross_amounts(
        vehicle.price_per_day, multiplier, duration_days, number_of_vehicles, driver_cost
    )

    discounts = await discount_service.compute_discounts(
        session,
        gross_amount=gross_amount,
        duration_days=duration_days,
        coupon_code=coupon_code,
        user_id=user_id,
        vehicle_type=vehicle.vehicle_type,
        now=now,
        exclude_booking_id=exclude_booking_id,
        coupon_held=coupon_held,
    )

    return assemble_breakdown(
        duration_days=duration_days,
        seasonal_multiplier=multiplier,
        price_per_day=vehicle.price_per_day,
        number_of_vehicles=number_of_vehicles,
        driver_cost=driver_cost,
        discounts=discounts,
        advance_amount=advance_amount,
        coupon_code=coupon_code,
    )
