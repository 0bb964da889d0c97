"""Driver service pricing for vehicle rentals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.core.config import get_settings
from yatra.core.money import ZERO, to_decimal, to_money
from yatra.models.pricing import DriverPricing
from yatra.models.vehicle import TourType

logger = logging.getLogger(__name__)

DIFFICULT_TERRAIN_TOUR_TYPES = frozenset({TourType.MOUNTAIN, TourType.OFF_ROAD})


@dataclass(slots=True, frozen=True)
class DriverCost:
    """Breakdown of the driver charge for a rental."""

    base_rate: Decimal
    distance_charge: Decimal
    terrain_charge: Decimal
    total: Decimal


def calculate_driver_cost(
    config: DriverPricing | None,
    *,
    tour_type: TourType | None,
    duration_days: int,
    number_of_drivers: int,
    estimated_distance_km: Decimal | None = None,
    default_rate: Decimal = Decimal("1000"),
) -> DriverCost:
    """Compute the driver charge from an optional driver config."""
    if duration_days < 1:
        raise ValueError("Rental duration must be at least one day")
    if number_of_drivers < 0:
        raise ValueError("Number of drivers cannot be negative")
    if number_of_drivers == 0:
        return DriverCost(ZERO, ZERO, ZERO, ZERO)

    base_rate = to_decimal(default_rate)
    distance_charge = Decimal("0")
    terrain_charge = Decimal("0")

    if config is not None:
        if config.base_driver_rate is not None:
            base_rate = to_decimal(config.base_driver_rate)

        if estimated_distance_km is not None and config.price_per_km is not None:
            distance_charge = to_decimal(estimated_distance_km) * to_decimal(
                config.price_per_km
            )

        multiplier = config.terrain_multiplier
        if (
            tour_type in DIFFICULT_TERRAIN_TOUR_TYPES
            and multiplier is not None
            and to_decimal(multiplier) > 1
        ):
            terrain_charge = (
                base_rate
                * (to_decimal(multiplier) - 1)
                * duration_days
                * number_of_drivers
            )

    total = base_rate * duration_days * number_of_drivers + distance_charge + terrain_charge
    return DriverCost(
        base_rate=to_money(base_rate),
        distance_charge=to_money(distance_charge),
        terrain_charge=to_money(terrain_charge),
        total=to_money(total),
    )


async def get_driver_config(
    session: AsyncSession, tour_type: TourType
) -> DriverPricing | None:
    stmt = (
        select(DriverPricing)
        .where(
            DriverPricing.tour_type == tour_type,
            DriverPricing.is_active.is_(True),
        )
        .order_by(DriverPricing.priority.desc(), DriverPricing.created_at.asc())
        .limit(1)
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def compute_driver_cost(
    session: AsyncSession,
    *,
    tour_type: TourType | None,
    duration_days: int,
    number_of_drivers: int,
    estimated_distance_km: Decimal | None = None,
) -> DriverCost:
    """Look up driver pricing for the tour type and compute the charge.

    A missing or inactive config falls back to the default daily rate with
    no distance or terrain surcharge; it never blocks a booking.
    """
    config = None
    if tour_type is not None and number_of_drivers > 0:
        config = await get_driver_config(session, tour_type)
    if config is None and number_of_drivers > 0:
        logger.debug("No driver pricing for tour type %s; using default rate", tour_type)
    return calculate_driver_cost(
        config,
        tour_type=tour_type,
        duration_days=duration_days,
        number_of_drivers=number_of_drivers,
        estimated_distance_km=estimated_distance_km,
        default_rate=get_settings().default_driver_daily_rate,
    )
