"""Participant-based pricing for guided tour bookings."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.core.money import ZERO, money_str, to_decimal, to_money
from yatra.models.tour_guide_pricing import TourGuidePricing

_HUNDRED = Decimal("100")


@dataclass(frozen=True, slots=True)
class TourQuote:
    total_price: Decimal
    discount_price: Decimal
    guide_total_price: Decimal | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_price": money_str(self.total_price),
            "discount_price": money_str(self.discount_price),
            "guide_total_price": (
                None
                if self.guide_total_price is None
                else money_str(self.guide_total_price)
            ),
        }


def calculate_tour_booking_price(
    price_per_participant: Decimal | int | float,
    number_of_participants: int,
    discount_rate: Decimal | int | float = 0,
    needs_guide: bool = False,
    guide_price_per_participant: Decimal | int | float = 0,
) -> TourQuote:
    """Price a tour for a party, with an optional per-participant guide fee.

    The discount rate applies to the participant price only; the guide fee is
    added after discounting.
    """
    if number_of_participants < 1:
        raise ValueError("number_of_participants must be at least 1")
    base = to_decimal(price_per_participant) * number_of_participants
    discount = base * to_decimal(discount_rate) / _HUNDRED
    guide_total = (
        to_decimal(guide_price_per_participant) * number_of_participants
        if needs_guide
        else None
    )
    total = base - discount + (guide_total or ZERO)
    return TourQuote(
        total_price=to_money(total),
        discount_price=to_money(discount),
        guide_total_price=None if guide_total is None else to_money(guide_total),
    )


def calculate_discount_amount(
    base_price: Decimal | int | float,
    discount_rate: Decimal | int | float | None = None,
    discount_amount: Decimal | int | float | None = None,
) -> Decimal:
    """Resolve a tour discount: a positive rate wins over a flat amount."""
    rate = to_decimal(discount_rate)
    if rate > 0:
        return to_money(to_decimal(base_price) * rate / _HUNDRED)
    flat = to_decimal(discount_amount)
    if flat > 0:
        return to_money(flat)
    return ZERO


def calculate_final_price(
    base_price: Decimal | int | float, discount_amount: Decimal | int | float
) -> Decimal:
    return to_money(max(ZERO, to_decimal(base_price) - to_decimal(discount_amount)))


async def get_guide_pricing(
    session: AsyncSession, tour_id: uuid.UUID | None
) -> TourGuidePricing | None:
    """Return the tour's active guide pricing, else the active default."""
    if tour_id is not None:
        stmt = (
            select(TourGuidePricing)
            .where(
                TourGuidePricing.tour_id == tour_id,
                TourGuidePricing.is_active.is_(True),
            )
            .order_by(TourGuidePricing.created_at)
            .limit(1)
        )
        pricing = (await session.execute(stmt)).scalars().first()
        if pricing is not None:
            return pricing

    stmt = (
        select(TourGuidePricing)
        .where(
            TourGuidePricing.is_default.is_(True),
            TourGuidePricing.is_active.is_(True),
        )
        .order_by(TourGuidePricing.created_at)
        .limit(1)
    )
    return (await session.execute(stmt)).scalars().first()


async def quote_tour(
    session: AsyncSession,
    *,
    tour_id: uuid.UUID | None,
    price_per_participant: Decimal,
    number_of_participants: int,
    discount_rate: Decimal = ZERO,
    needs_guide: bool = False,
) -> TourQuote:
    guide_price = ZERO
    if needs_guide:
        pricing = await get_guide_pricing(session, tour_id)
        if pricing is None:
            raise ValueError("Guide pricing is not configured")
        guide_price = pricing.price_per_participant
    return calculate_tour_booking_price(
        price_per_participant,
        number_of_participants,
        discount_rate,
        needs_guide,
        guide_price,
    )
