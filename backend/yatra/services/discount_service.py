"""Coupon and long-term discount resolution for vehicle bookings.

Coupon eligibility is checked gate by gate and the first failing gate
aborts pricing with a :class:`CouponError`. The long-term discount is
evaluated independently and stacks on top of any coupon discount.

Nothing here touches ``usage_count``; consuming a coupon is done by the
booking service in the same transaction that stores the booking.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.core.clock import coerce_utc, utcnow
from yatra.core.money import ZERO, display_amount, money_str, to_decimal, to_money
from yatra.models.pricing import DiscountPricing, DiscountSource, DiscountValueType
from yatra.models.vehicle import VehicleType
from yatra.models.vehicle_booking import RentalStatus, VehicleBooking

LONG_TERM_MIN_DAYS = 7


class CouponError(ValueError):
    """Base class for coupon rejections surfaced to the customer."""


class InvalidOrExpiredCoupon(CouponError):
    def __init__(self) -> None:
        super().__init__("Invalid or expired coupon code.")


class CouponUsageLimitReached(CouponError):
    def __init__(self) -> None:
        super().__init__("This coupon has reached its usage limit.")


class CouponPerUserLimitReached(CouponError):
    def __init__(self, per_user_limit: int) -> None:
        super().__init__(
            f"You have already used this coupon {per_user_limit} time(s). "
            "Per-user limit reached."
        )


class CouponMinimumAmountNotMet(CouponError):
    def __init__(self, min_booking_amount: Decimal) -> None:
        super().__init__(
            f"Minimum booking amount of NPR {display_amount(min_booking_amount)} "
            "required for this coupon."
        )


class CouponMinimumDaysNotMet(CouponError):
    def __init__(self, min_days: int) -> None:
        super().__init__(f"Minimum {min_days} days required for this coupon.")


class CouponVehicleTypeMismatch(CouponError):
    def __init__(self, vehicle_type: VehicleType | str) -> None:
        label = vehicle_type.value if isinstance(vehicle_type, VehicleType) else vehicle_type
        super().__init__(f"This coupon is not applicable for {label} vehicle type.")


@dataclass(slots=True, frozen=True)
class AppliedDiscount:
    """One discount line applied to a booking."""

    source: DiscountSource
    value_type: DiscountValueType
    value: Decimal
    amount: Decimal
    code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "source": self.source.value,
            "value_type": self.value_type.value,
            "value": money_str(self.value),
            "amount": money_str(self.amount),
        }
        if self.code is not None:
            data["code"] = self.code
        return data


@dataclass(slots=True)
class DiscountResult:
    """Discounts stacked against a gross amount."""

    discounts: list[AppliedDiscount] = field(default_factory=list)
    total_discount: Decimal = ZERO


def _discount_amount(
    value_type: DiscountValueType | None,
    value: Decimal,
    gross_amount: Decimal,
    *,
    cap: Decimal | None = None,
) -> Decimal:
    if value_type is DiscountValueType.PERCENTAGE:
        amount = gross_amount * value / Decimal("100")
        if cap is not None and amount > cap:
            amount = cap
        return to_money(amount)
    if value_type is DiscountValueType.FIXED:
        return to_money(value)
    return ZERO


def apply_coupon(
    coupon: DiscountPricing,
    *,
    gross_amount: Decimal,
    duration_days: int,
    vehicle_type: VehicleType | str,
    user_usage_count: int = 0,
    held_uses: int = 0,
) -> AppliedDiscount | None:
    """Run the eligibility gates for a resolved coupon and price it.

    ``held_uses`` are uses already counted against the coupon by the booking
    being repriced. Returns ``None`` when the coupon is eligible but worth
    nothing.
    """
    gross_amount = to_decimal(gross_amount)

    used = max(0, (coupon.usage_count or 0) - held_uses)
    if coupon.usage_limit is not None and used >= coupon.usage_limit:
        raise CouponUsageLimitReached()

    if coupon.per_user_limit is not None and user_usage_count >= coupon.per_user_limit:
        raise CouponPerUserLimitReached(coupon.per_user_limit)

    if coupon.min_booking_amount is not None and gross_amount < to_decimal(
        coupon.min_booking_amount
    ):
        raise CouponMinimumAmountNotMet(to_decimal(coupon.min_booking_amount))

    if coupon.min_days is not None and duration_days < coupon.min_days:
        raise CouponMinimumDaysNotMet(coupon.min_days)

    if not coupon.applies_to_vehicle_type(vehicle_type):
        raise CouponVehicleTypeMismatch(vehicle_type)

    value = to_decimal(coupon.discount_value)
    cap = to_decimal(coupon.max_discount) if coupon.max_discount is not None else None
    # max_discount caps percentage coupons only
    amount = _discount_amount(coupon.discount_value_type, value, gross_amount, cap=cap)
    if amount <= 0:
        return None
    return AppliedDiscount(
        source=DiscountSource.COUPON,
        value_type=coupon.discount_value_type or DiscountValueType.FIXED,
        value=value,
        amount=amount,
        code=coupon.code,
    )


def apply_long_term_discount(
    config: DiscountPricing, *, gross_amount: Decimal
) -> AppliedDiscount | None:
    """Price a long-term rental discount; no cap is applied."""
    value = to_decimal(config.discount_value)
    if value <= 0:
        return None
    value_type = config.discount_value_type or DiscountValueType.FIXED
    amount = _discount_amount(value_type, value, to_decimal(gross_amount))
    if amount <= 0:
        return None
    return AppliedDiscount(
        source=DiscountSource.LONG_TERM,
        value_type=value_type,
        value=value,
        amount=amount,
    )


async def get_active_coupon(
    session: AsyncSession, *, code: str, now: datetime
) -> DiscountPricing | None:
    stmt = (
        select(DiscountPricing)
        .where(
            DiscountPricing.code == code,
            DiscountPricing.is_active.is_(True),
            or_(DiscountPricing.valid_from.is_(None), DiscountPricing.valid_from <= now),
            or_(DiscountPricing.valid_until.is_(None), DiscountPricing.valid_until >= now),
        )
        .order_by(DiscountPricing.created_at.asc())
        .limit(1)
    )
    result = await session.execute(stmt)
    coupon = result.scalars().first()
    if coupon is None or not coupon.discount_value:
        return None
    return coupon


async def count_user_coupon_usage(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    code: str,
    exclude_booking_id: uuid.UUID | None = None,
) -> int:
    """Count the user's non-cancelled bookings that carry the coupon code."""
    stmt = select(func.count()).select_from(VehicleBooking).where(
        VehicleBooking.user_id == user_id,
        VehicleBooking.coupon_code == code,
        VehicleBooking.status != RentalStatus.CANCELLED,
    )
    if exclude_booking_id is not None:
        stmt = stmt.where(VehicleBooking.id != exclude_booking_id)
    return (await session.execute(stmt)).scalar_one()


async def get_long_term_config(
    session: AsyncSession, *, duration_days: int
) -> DiscountPricing | None:
    """Return the long-term config with the highest threshold the rental meets."""
    stmt = (
        select(DiscountPricing)
        .where(
            DiscountPricing.discount_source == DiscountSource.LONG_TERM,
            DiscountPricing.min_days <= duration_days,
            DiscountPricing.is_active.is_(True),
        )
        .order_by(DiscountPricing.min_days.desc(), DiscountPricing.created_at.asc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def compute_discounts(
    session: AsyncSession,
    *,
    gross_amount: Decimal,
    duration_days: int,
    coupon_code: str | None,
    user_id: uuid.UUID,
    vehicle_type: VehicleType | str,
    now: datetime | None = None,
    exclude_booking_id: uuid.UUID | None = None,
    coupon_held: bool = False,
) -> DiscountResult:
    """Resolve and stack coupon and long-term discounts.

    Set ``coupon_held`` when the booking being repriced already consumed one
    use of ``coupon_code``.

    Raises a :class:`CouponError` subclass on the first failed coupon gate.
    """
    now = coerce_utc(now or utcnow())
    gross_amount = to_decimal(gross_amount)
    result = DiscountResult()

    if coupon_code:
        coupon = await get_active_coupon(session, code=coupon_code, now=now)
        if coupon is None:
            raise InvalidOrExpiredCoupon()
        usage = 0
        if coupon.per_user_limit is not None:
            usage = await count_user_coupon_usage(
                session,
                user_id=user_id,
                code=coupon_code,
                exclude_booking_id=exclude_booking_id,
            )
        applied = apply_coupon(
            coupon,
            gross_amount=gross_amount,
            duration_days=duration_days,
            vehicle_type=vehicle_type,
            user_usage_count=usage,
            held_uses=1 if coupon_held else 0,
        )
        if applied is not None:
            result.discounts.append(applied)
            result.total_discount += applied.amount

    if duration_days >= LONG_TERM_MIN_DAYS:
        config = await get_long_term_config(session, duration_days=duration_days)
        if config is not None:
            applied = apply_long_term_discount(config, gross_amount=gross_amount)
            if applied is not None:
                result.discounts.append(applied)
                result.total_discount += applied.amount

    result.total_discount = to_money(result.total_discount)
    return result
