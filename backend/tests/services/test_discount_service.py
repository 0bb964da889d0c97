"""Tests for coupon gates and discount stacking."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal
import uuid

import pytest

from yatra.db.session import get_sessionmaker
from yatra.models import (
    DiscountPricing,
    DiscountSource,
    DiscountValueType,
    VehicleType,
)
from yatra.services import discount_service
from yatra.services.discount_service import (
    CouponMinimumAmountNotMet,
    CouponMinimumDaysNotMet,
    CouponPerUserLimitReached,
    CouponUsageLimitReached,
    CouponVehicleTypeMismatch,
    InvalidOrExpiredCoupon,
    apply_coupon,
)


def _coupon(**overrides) -> DiscountPricing:
    values = {
        "name": "Ten percent",
        "code": "SAVE10",
        "is_active": True,
        "priority": 0,
        "discount_source": DiscountSource.COUPON,
        "discount_value": Decimal("10"),
        "discount_value_type": DiscountValueType.PERCENTAGE,
        "usage_count": 0,
        "vehicle_types": [],
        "regions": [],
    }
    values.update(overrides)
    return DiscountPricing(**values)


def _apply(coupon: DiscountPricing, gross: str = "1000", days: int = 3, **kwargs):
    return apply_coupon(
        coupon,
        gross_amount=Decimal(gross),
        duration_days=days,
        vehicle_type=kwargs.pop("vehicle_type", VehicleType.SUV),
        **kwargs,
    )


def test_percentage_coupon() -> None:
    applied = _apply(_coupon())
    assert applied is not None
    assert applied.amount == Decimal("100.00")
    assert applied.to_dict() == {
        "source": "COUPON",
        "value_type": "PERCENTAGE",
        "value": "10.00",
        "amount": "100.00",
        "code": "SAVE10",
    }


def test_percentage_coupon_respects_cap() -> None:
    applied = _apply(_coupon(max_discount=Decimal("50")))
    assert applied is not None
    assert applied.amount == Decimal("50.00")


def test_fixed_coupon_ignores_cap() -> None:
    applied = _apply(
        _coupon(
            discount_value=Decimal("300"),
            discount_value_type=DiscountValueType.FIXED,
            max_discount=Decimal("50"),
        )
    )
    assert applied is not None
    assert applied.amount == Decimal("300.00")


def test_minimum_amount_gate() -> None:
    with pytest.raises(CouponMinimumAmountNotMet) as excinfo:
        _apply(_coupon(min_booking_amount=Decimal("5000")))
    assert str(excinfo.value) == (
        "Minimum booking amount of NPR 5000 required for this coupon."
    )


def test_usage_limit_gate_runs_first() -> None:
    coupon = _coupon(
        usage_limit=5, usage_count=5, min_booking_amount=Decimal("5000")
    )
    with pytest.raises(CouponUsageLimitReached):
        _apply(coupon)


def test_held_use_does_not_count_against_limit() -> None:
    coupon = _coupon(usage_limit=1, usage_count=1)
    applied = _apply(coupon, held_uses=1)
    assert applied is not None
    assert applied.amount == Decimal("100.00")
    with pytest.raises(CouponUsageLimitReached):
        _apply(coupon)


def test_per_user_limit_gate() -> None:
    with pytest.raises(CouponPerUserLimitReached) as excinfo:
        _apply(_coupon(per_user_limit=1), user_usage_count=1)
    assert "1 time(s)" in str(excinfo.value)


def test_minimum_days_gate() -> None:
    with pytest.raises(CouponMinimumDaysNotMet):
        _apply(_coupon(min_days=5), days=4)


def test_vehicle_type_gate() -> None:
    with pytest.raises(CouponVehicleTypeMismatch) as excinfo:
        _apply(_coupon(vehicle_types=["CAR"]), vehicle_type=VehicleType.BUS)
    assert "BUS" in str(excinfo.value)


def test_coupon_errors_are_value_errors() -> None:
    assert issubclass(InvalidOrExpiredCoupon, ValueError)


async def _add(session, *configs: DiscountPricing) -> None:
    session.add_all(configs)
    await session.commit()


@pytest.mark.asyncio
async def test_long_term_discount_stacks_without_coupon(
    reset_database, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await _add(
            session,
            DiscountPricing(
                name="Weekly",
                discount_source=DiscountSource.LONG_TERM,
                discount_value=Decimal("5"),
                discount_value_type=DiscountValueType.PERCENTAGE,
                min_days=7,
            ),
        )
        result = await discount_service.compute_discounts(
            session,
            gross_amount=Decimal("2000"),
            duration_days=10,
            coupon_code=None,
            user_id=uuid.uuid4(),
            vehicle_type=VehicleType.CAR,
        )
    assert result.total_discount == Decimal("100.00")
    assert [item.source for item in result.discounts] == [DiscountSource.LONG_TERM]


@pytest.mark.asyncio
async def test_coupon_and_long_term_add_up(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await _add(
            session,
            DiscountPricing(
                name="Weekly",
                discount_source=DiscountSource.LONG_TERM,
                discount_value=Decimal("5"),
                discount_value_type=DiscountValueType.PERCENTAGE,
                min_days=7,
            ),
            _coupon(),
        )
        result = await discount_service.compute_discounts(
            session,
            gross_amount=Decimal("2000"),
            duration_days=10,
            coupon_code="SAVE10",
            user_id=uuid.uuid4(),
            vehicle_type=VehicleType.CAR,
        )
    assert result.total_discount == Decimal("300.00")
    assert [item.source for item in result.discounts] == [
        DiscountSource.COUPON,
        DiscountSource.LONG_TERM,
    ]


@pytest.mark.asyncio
async def test_expired_or_unknown_coupon_rejected(reset_database, db_url: str) -> None:
    now = datetime.now(UTC)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        await _add(
            session,
            _coupon(
                code="OLD",
                valid_from=now - timedelta(days=30),
                valid_until=now - timedelta(days=1),
            ),
        )
        for code in ("OLD", "NOPE"):
            with pytest.raises(InvalidOrExpiredCoupon):
                await discount_service.compute_discounts(
                    session,
                    gross_amount=Decimal("1000"),
                    duration_days=2,
                    coupon_code=code,
                    user_id=uuid.uuid4(),
                    vehicle_type=VehicleType.CAR,
                    now=now,
                )
