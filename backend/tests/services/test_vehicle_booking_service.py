"""Tests for the vehicle booking lifecycle."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import select

from yatra.db.session import get_sessionmaker
from yatra.models import (
    DiscountPricing,
    DiscountSource,
    DiscountValueType,
    RentalStatus,
    User,
    UserRole,
    Vehicle,
    VehicleStatus,
    VehicleType,
)
from yatra.services import vehicle_booking_service
from yatra.services.discount_service import (
    CouponPerUserLimitReached,
    CouponUsageLimitReached,
)

pytestmark = pytest.mark.asyncio

START = datetime.now(UTC).replace(microsecond=0) + timedelta(days=20)


async def _seed(session, *, quantity: int = 2) -> tuple[User, Vehicle]:
    user = User(
        email="traveller@example.com",
        hashed_password="x",
        full_name="Sita Traveller",
        role=UserRole.CUSTOMER,
    )
    vehicle = Vehicle(
        vehicle_type=VehicleType.JEEP,
        brand="Mahindra",
        model="Scorpio",
        price_per_day=Decimal("100.00"),
        total_quantity=quantity,
        city="Kathmandu",
        region="Bagmati",
    )
    session.add_all([user, vehicle])
    await session.commit()
    return user, vehicle


def _coupon(**overrides) -> DiscountPricing:
    values = {
        "name": "Ten percent",
        "code": "SAVE10",
        "discount_source": DiscountSource.COUPON,
        "discount_value": Decimal("10"),
        "discount_value_type": DiscountValueType.PERCENTAGE,
        "usage_count": 0,
    }
    values.update(overrides)
    return DiscountPricing(**values)


async def _book(session, user: User, vehicle: Vehicle, **kwargs):
    days = kwargs.pop("days", 5)
    start = kwargs.pop("start", START)
    return await vehicle_booking_service.create_booking(
        session,
        user=user,
        vehicle=vehicle,
        start_date=start,
        end_date=start + timedelta(days=days),
        **kwargs,
    )


async def _usage_count(db_url: str, code: str) -> int:
    async with get_sessionmaker(db_url)() as session:
        result = await session.execute(
            select(DiscountPricing.usage_count).where(DiscountPricing.code == code)
        )
        return result.scalar_one()


async def test_create_booking_persists_price_and_consumes_coupon(
    reset_database, db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        user, vehicle = await _seed(session)
        session.add(_coupon(usage_limit=3))
        await session.commit()

        booking = await _book(
            session, user, vehicle, number_of_vehicles=2, coupon_code="SAVE10"
        )

    assert booking.status == RentalStatus.PENDING
    assert booking.booking_code.startswith("VBK-")
    assert booking.gross_amount == Decimal("1000.00")
    assert booking.total_price == Decimal("900.00")
    assert booking.applied_discounts[0]["code"] == "SAVE10"
    assert await _usage_count(db_url, "SAVE10") == 1


async def test_last_coupon_use_cannot_be_taken_twice(
    reset_database, db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        user, vehicle = await _seed(session, quantity=5)
        session.add(_coupon(usage_limit=1))
        await session.commit()

        await _book(session, user, vehicle, coupon_code="SAVE10")

        with pytest.raises(CouponUsageLimitReached):
            await _book(session, user, vehicle, coupon_code="SAVE10")

    assert await _usage_count(db_url, "SAVE10") == 1
    async with get_sessionmaker(db_url)() as session:
        items, total = await vehicle_booking_service.list_bookings(session)
    assert total == 1


async def test_conditional_increment_rejects_exhausted_coupon(
    reset_database, db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        session.add(_coupon(usage_limit=2, usage_count=2))
        await session.commit()
        with pytest.raises(CouponUsageLimitReached):
            await vehicle_booking_service._consume_coupon(session, "SAVE10")
        await session.rollback()

    assert await _usage_count(db_url, "SAVE10") == 2


async def test_per_user_limit_counts_existing_bookings(
    reset_database, db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        user, vehicle = await _seed(session, quantity=5)
        session.add(_coupon(per_user_limit=1))
        await session.commit()

        await _book(session, user, vehicle, coupon_code="SAVE10")
        with pytest.raises(CouponPerUserLimitReached):
            await _book(session, user, vehicle, coupon_code="SAVE10")


async def test_availability_accounts_for_overlapping_bookings(
    reset_database, db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        user, vehicle = await _seed(session, quantity=2)
        await _book(session, user, vehicle, number_of_vehicles=2)

        with pytest.raises(ValueError, match="Only 0 vehicle"):
            await _book(session, user, vehicle, start=START + timedelta(days=2))

        later = await _book(session, user, vehicle, start=START + timedelta(days=10))
    assert later.number_of_vehicles == 1


async def test_unavailable_vehicle_rejected(reset_database, db_url: str) -> None:
    async with get_sessionmaker(db_url)() as session:
        user, vehicle = await _seed(session)
        vehicle.status = VehicleStatus.MAINTENANCE
        await session.commit()
        with pytest.raises(ValueError, match="not available"):
            await _book(session, user, vehicle)


async def test_update_reprices_and_swaps_coupon(reset_database, db_url: str) -> None:
    async with get_sessionmaker(db_url)() as session:
        user, vehicle = await _seed(session)
        session.add_all(
            [
                _coupon(),
                _coupon(
                    name="Flat",
                    code="FLAT50",
                    discount_value=Decimal("50"),
                    discount_value_type=DiscountValueType.FIXED,
                ),
            ]
        )
        await session.commit()
        booking = await _book(session, user, vehicle, coupon_code="SAVE10")

        updated = await vehicle_booking_service.update_booking(
            session,
            booking=booking,
            user=user,
            changes={"end_date": START + timedelta(days=3), "coupon_code": "FLAT50"},
        )

    assert updated.duration_days == 3
    assert updated.gross_amount == Decimal("300.00")
    assert updated.total_price == Decimal("250.00")
    assert updated.coupon_code == "FLAT50"
    assert await _usage_count(db_url, "SAVE10") == 0
    assert await _usage_count(db_url, "FLAT50") == 1


async def test_update_keeps_own_coupon_under_per_user_limit(
    reset_database, db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        user, vehicle = await _seed(session)
        session.add(_coupon(per_user_limit=1))
        await session.commit()
        booking = await _book(session, user, vehicle, coupon_code="SAVE10")

        updated = await vehicle_booking_service.update_booking(
            session, booking=booking, user=user, changes={"number_of_vehicles": 2}
        )
    assert updated.total_price == Decimal("900.00")
    assert await _usage_count(db_url, "SAVE10") == 1


async def test_update_keeps_last_use_of_capped_coupon(
    reset_database, db_url: str
) -> None:
    async with get_sessionmaker(db_url)() as session:
        user, vehicle = await _seed(session)
        session.add(_coupon(usage_limit=1))
        await session.commit()
        booking = await _book(session, user, vehicle, coupon_code="SAVE10")

        updated = await vehicle_booking_service.update_booking(
            session,
            booking=booking,
            user=user,
            changes={"end_date": START + timedelta(days=6)},
        )
    assert updated.duration_days == 6
    assert updated.total_price == Decimal("540.00")
    assert updated.coupon_code == "SAVE10"
    assert await _usage_count(db_url, "SAVE10") == 1


async def test_cancel_records_refund(reset_database, db_url: str) -> None:
    async with get_sessionmaker(db_url)() as session:
        user, vehicle = await _seed(session)
        booking = await _book(session, user, vehicle, start=START, days=10)

        cancelled, decision = await vehicle_booking_service.cancel_booking(
            session,
            booking=booking,
            cancelled_by=user,
            reason="Plans changed",
            now=START - timedelta(days=2),
        )

        assert cancelled.status == RentalStatus.CANCELLED
        assert decision.refund_percentage == 25
        assert cancelled.refund_amount == Decimal("250.00")
        assert cancelled.cancelled_by == "Sita Traveller"

        with pytest.raises(ValueError, match="already cancelled"):
            await vehicle_booking_service.cancel_booking(
                session, booking=cancelled, cancelled_by=user
            )
        with pytest.raises(ValueError):
            await vehicle_booking_service.update_booking(
                session, booking=cancelled, user=user, changes={"number_of_vehicles": 2}
            )


async def test_status_transitions(reset_database, db_url: str) -> None:
    async with get_sessionmaker(db_url)() as session:
        user, vehicle = await _seed(session)
        booking = await _book(session, user, vehicle)

        with pytest.raises(ValueError, match="Invalid status transition"):
            await vehicle_booking_service.update_booking_status(
                session, booking=booking, status=RentalStatus.COMPLETED
            )

        for status in (
            RentalStatus.CONFIRMED,
            RentalStatus.ACTIVE,
            RentalStatus.COMPLETED,
        ):
            booking = await vehicle_booking_service.update_booking_status(
                session, booking=booking, status=status
            )

        assert booking.completed_at is not None
        with pytest.raises(ValueError, match="completed"):
            await vehicle_booking_service.cancel_booking(
                session, booking=booking, cancelled_by=user
            )
