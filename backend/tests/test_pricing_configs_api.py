"""API tests for pricing configuration administration."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _authenticate(client: AsyncClient, email: str, password: str) -> str:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    return response.json()["access_token"]


async def _admin_headers(app_context: dict[str, object]) -> dict[str, str]:
    token = await _authenticate(
        app_context["client"],
        app_context["admin_email"],
        app_context["admin_password"],
    )
    return {"Authorization": f"Bearer {token}"}


async def test_create_each_variant(app_context: dict[str, object]) -> None:
    client = app_context["client"]
    headers = await _admin_headers(app_context)

    seasonal = await client.post(
        "/api/v1/pricing-configs",
        json={
            "type": "SEASONAL",
            "name": "Festival",
            "price_multiplier": "1.25",
            "valid_from": "2026-10-01T00:00:00Z",
            "valid_until": "2026-11-15T00:00:00Z",
            "regions": ["Bagmati"],
        },
        headers=headers,
    )
    assert seasonal.status_code == 201, seasonal.text
    assert seasonal.json()["type"] == "SEASONAL"
    assert seasonal.json()["code"] is None

    driver = await client.post(
        "/api/v1/pricing-configs",
        json={
            "type": "DRIVER",
            "name": "Off road driver",
            "tour_type": "OFF_ROAD",
            "base_driver_rate": "1800",
            "terrain_multiplier": "1.4",
        },
        headers=headers,
    )
    assert driver.status_code == 201, driver.text

    coupon = await client.post(
        "/api/v1/pricing-configs",
        json={
            "type": "DISCOUNT",
            "name": "Welcome",
            "code": "WELCOME10",
            "discount_source": "COUPON",
            "discount_value": "10",
            "discount_value_type": "PERCENTAGE",
            "usage_limit": 100,
        },
        headers=headers,
    )
    assert coupon.status_code == 201, coupon.text
    assert coupon.json()["usage_count"] == 0

    duplicate = await client.post(
        "/api/v1/pricing-configs",
        json={
            "type": "DISCOUNT",
            "name": "Welcome again",
            "code": "WELCOME10",
            "discount_source": "COUPON",
            "discount_value": "5",
            "discount_value_type": "FIXED",
        },
        headers=headers,
    )
    assert duplicate.status_code == 400

    listing = await client.get(
        "/api/v1/pricing-configs", params={"type": "DISCOUNT"}, headers=headers
    )
    assert listing.status_code == 200
    assert [item["code"] for item in listing.json()] == ["WELCOME10"]


async def test_invalid_payloads_rejected(app_context: dict[str, object]) -> None:
    client = app_context["client"]
    headers = await _admin_headers(app_context)

    over_hundred = await client.post(
        "/api/v1/pricing-configs",
        json={
            "type": "DISCOUNT",
            "name": "Too generous",
            "code": "FREE",
            "discount_source": "COUPON",
            "discount_value": "150",
            "discount_value_type": "PERCENTAGE",
        },
        headers=headers,
    )
    assert over_hundred.status_code == 422

    backwards_window = await client.post(
        "/api/v1/pricing-configs",
        json={
            "type": "SEASONAL",
            "name": "Backwards",
            "price_multiplier": "1.1",
            "valid_from": "2026-12-01T00:00:00Z",
            "valid_until": "2026-11-01T00:00:00Z",
        },
        headers=headers,
    )
    assert backwards_window.status_code == 422


async def test_update_and_delete(app_context: dict[str, object]) -> None:
    client = app_context["client"]
    headers = await _admin_headers(app_context)
    created = await client.post(
        "/api/v1/pricing-configs",
        json={"type": "SEASONAL", "name": "Monsoon", "price_multiplier": "0.9"},
        headers=headers,
    )
    config_id = created.json()["id"]

    updated = await client.patch(
        f"/api/v1/pricing-configs/{config_id}",
        json={"price_multiplier": "0.8", "priority": 4},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["priority"] == 4

    wrong_field = await client.patch(
        f"/api/v1/pricing-configs/{config_id}",
        json={"code": "NOPE"},
        headers=headers,
    )
    assert wrong_field.status_code == 400

    deleted = await client.delete(
        f"/api/v1/pricing-configs/{config_id}", headers=headers
    )
    assert deleted.status_code == 204
    missing = await client.get(f"/api/v1/pricing-configs/{config_id}", headers=headers)
    assert missing.status_code == 404


async def test_customers_cannot_manage_configs(app_context: dict[str, object]) -> None:
    client = app_context["client"]
    token = await _authenticate(
        client, app_context["customer_email"], app_context["customer_password"]
    )
    response = await client.get(
        "/api/v1/pricing-configs", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 403
