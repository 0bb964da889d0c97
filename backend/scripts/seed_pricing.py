"""Seed baseline pricing configuration: festival season, drivers, discounts."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from sqlalchemy import select

from yatra.db.session import get_sessionmaker
from yatra.models import (
    DiscountPricing,
    DiscountSource,
    DiscountValueType,
    DriverPricing,
    PricingConfig,
    SeasonalPricing,
    TourGuidePricing,
    TourType,
)

FESTIVAL_NAME = "Dashain-Tihar festival season"
DRIVER_NAME = "Standard driver"
MOUNTAIN_DRIVER_NAME = "Mountain driver"
LONG_TERM_NAME = "Weekly rental discount"
PROMO_CODE = "WELCOME10"


def _festival_window(today: datetime | None = None) -> tuple[datetime, datetime]:
    today = today or datetime.now(UTC)
    start = datetime(today.year, 10, 1, tzinfo=UTC)
    if start.date() < today.date() - timedelta(days=45):
        start = start.replace(year=today.year + 1)
    return start, start + timedelta(days=45)


def _seed_configs(now: datetime) -> list[PricingConfig]:
    festival_start, festival_end = _festival_window(now)
    return [
        SeasonalPricing(
            name=FESTIVAL_NAME,
            priority=10,
            valid_from=festival_start,
            valid_until=festival_end,
            price_multiplier=Decimal("1.25"),
        ),
        DriverPricing(
            name=DRIVER_NAME,
            base_driver_rate=Decimal("1500"),
            price_per_km=Decimal("5"),
        ),
        DriverPricing(
            name=MOUNTAIN_DRIVER_NAME,
            tour_type=TourType.MOUNTAIN,
            base_driver_rate=Decimal("2000"),
            price_per_km=Decimal("8"),
            terrain_multiplier=Decimal("1.2"),
        ),
        DiscountPricing(
            name=LONG_TERM_NAME,
            discount_source=DiscountSource.LONG_TERM,
            discount_value=Decimal("5"),
            discount_value_type=DiscountValueType.PERCENTAGE,
            min_days=7,
        ),
        DiscountPricing(
            name="Welcome coupon",
            code=PROMO_CODE,
            discount_source=DiscountSource.COUPON,
            discount_value=Decimal("10"),
            discount_value_type=DiscountValueType.PERCENTAGE,
            max_discount=Decimal("2000"),
            valid_from=now,
            valid_until=now + timedelta(days=365),
            per_user_limit=1,
            usage_count=0,
        ),
    ]


async def seed_pricing() -> None:
    sessionmaker = get_sessionmaker()
    now = datetime.now(UTC)
    async with sessionmaker() as session:
        existing = set(
            (await session.execute(select(PricingConfig.name))).scalars().all()
        )
        configs = [cfg for cfg in _seed_configs(now) if cfg.name not in existing]
        session.add_all(configs)

        guide_default = (
            await session.execute(
                select(TourGuidePricing).where(TourGuidePricing.is_default.is_(True))
            )
        ).scalars().first()
        if guide_default is None:
            session.add(
                TourGuidePricing(price_per_participant=Decimal("500"), is_default=True)
            )

        await session.commit()
        print(f"Seeded {len(configs)} pricing config(s).")


def main() -> None:
    asyncio.run(seed_pricing())


if __name__ == "__main__":
    main()
