"""Seasonal rate lookup."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.core.clock import coerce_utc
from yatra.models.pricing import SeasonalPricing

logger = logging.getLogger(__name__)

NEUTRAL_MULTIPLIER = Decimal("1")


def _overlaps(config: SeasonalPricing, start_date: datetime, end_date: datetime) -> bool:
    if config.valid_from is not None and coerce_utc(config.valid_from) > end_date:
        return False
    if config.valid_until is not None and coerce_utc(config.valid_until) < start_date:
        return False
    return True


def select_seasonal_config(
    configs: Iterable[SeasonalPricing],
    *,
    start_date: datetime,
    end_date: datetime,
    vehicle_type: str,
    region: str | None,
) -> SeasonalPricing | None:
    """Pick the applicable seasonal config for a rental window.

    Highest ``priority`` wins; equal priorities resolve to the config that
    was created first. Configs are expected in creation order.
    """
    start_date = coerce_utc(start_date)
    end_date = coerce_utc(end_date)
    selected: SeasonalPricing | None = None
    for config in configs:
        if not config.is_active:
            continue
        if not _overlaps(config, start_date, end_date):
            continue
        if not config.applies_to_vehicle_type(vehicle_type):
            continue
        if not config.applies_to_region(region):
            continue
        # strict comparison keeps the earliest config on ties
        if selected is None or config.priority > selected.priority:
            selected = config
    return selected


async def list_seasonal_candidates(
    session: AsyncSession, *, start_date: datetime, end_date: datetime
) -> list[SeasonalPricing]:
    """Return active seasonal configs whose window overlaps the rental."""
    stmt = (
        select(SeasonalPricing)
        .where(
            SeasonalPricing.is_active.is_(True),
            or_(
                SeasonalPricing.valid_from.is_(None),
                SeasonalPricing.valid_from <= end_date,
            ),
            or_(
                SeasonalPricing.valid_until.is_(None),
                SeasonalPricing.valid_until >= start_date,
            ),
        )
        .order_by(SeasonalPricing.created_at.asc(), SeasonalPricing.id.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def resolve_seasonal_multiplier(
    session: AsyncSession,
    *,
    start_date: datetime,
    end_date: datetime,
    vehicle_type: str,
    region: str | None,
) -> Decimal:
    """Return the seasonal price multiplier, or ``1`` when nothing applies."""
    candidates = await list_seasonal_candidates(
        session, start_date=start_date, end_date=end_date
    )
    config = select_seasonal_config(
        candidates,
        start_date=start_date,
        end_date=end_date,
        vehicle_type=vehicle_type,
        region=region,
    )
    if config is None or config.price_multiplier is None:
        logger.debug(
            "No seasonal pricing for %s in %s; using neutral multiplier",
            vehicle_type,
            region,
        )
        return NEUTRAL_MULTIPLIER
    return Decimal(config.price_multiplier)
