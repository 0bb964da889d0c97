"""Tests for driver cost calculation."""

from __future__ import annotations

from decimal import Decimal

import pytest

from yatra.models import DriverPricing, TourType
from yatra.services.driver_pricing_service import calculate_driver_cost


def _config(**overrides) -> DriverPricing:
    values = {
        "name": "Mountain driver",
        "is_active": True,
        "priority": 0,
        "base_driver_rate": Decimal("2000"),
        "price_per_km": Decimal("10"),
        "terrain_multiplier": Decimal("1.5"),
        "tour_type": TourType.MOUNTAIN,
    }
    values.update(overrides)
    return DriverPricing(**values)


def test_default_rate_without_config() -> None:
    cost = calculate_driver_cost(
        None,
        tour_type=TourType.CITY,
        duration_days=3,
        number_of_drivers=2,
        estimated_distance_km=Decimal("150"),
    )
    assert cost.base_rate == Decimal("1000.00")
    assert cost.distance_charge == Decimal("0.00")
    assert cost.terrain_charge == Decimal("0.00")
    assert cost.total == Decimal("6000.00")


def test_distance_and_terrain_surcharge() -> None:
    cost = calculate_driver_cost(
        _config(),
        tour_type=TourType.MOUNTAIN,
        duration_days=2,
        number_of_drivers=1,
        estimated_distance_km=Decimal("120"),
    )
    # 2000 * 2 days + 120 km * 10 + 2000 * 0.5 * 2 days
    assert cost.distance_charge == Decimal("1200.00")
    assert cost.terrain_charge == Decimal("2000.00")
    assert cost.total == Decimal("7200.00")


def test_terrain_multiplier_ignored_on_easy_tours() -> None:
    cost = calculate_driver_cost(
        _config(tour_type=TourType.HIGHWAY),
        tour_type=TourType.HIGHWAY,
        duration_days=2,
        number_of_drivers=1,
    )
    assert cost.terrain_charge == Decimal("0.00")
    assert cost.total == Decimal("4000.00")


def test_no_drivers_costs_nothing() -> None:
    cost = calculate_driver_cost(
        _config(), tour_type=TourType.MOUNTAIN, duration_days=4, number_of_drivers=0
    )
    assert cost.total == Decimal("0.00")


def test_invalid_duration_rejected() -> None:
    with pytest.raises(ValueError):
        calculate_driver_cost(
            None, tour_type=None, duration_days=0, number_of_drivers=1
        )
