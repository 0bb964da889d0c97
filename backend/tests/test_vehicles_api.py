"""API tests for the fleet endpoints."""

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


async def test_public_listing_and_admin_changes(app_context: dict[str, object]) -> None:
    client = app_context["client"]

    listing = await client.get("/api/v1/vehicles")
    assert listing.status_code == 200
    assert [item["brand"] for item in listing.json()] == ["Toyota"]

    payload = {
        "vehicle_type": "BUS",
        "brand": "Tata",
        "price_per_day": "450.00",
        "total_quantity": 1,
        "city": "Chitwan",
    }
    anonymous = await client.post("/api/v1/vehicles", json=payload)
    assert anonymous.status_code == 401

    customer_token = await _authenticate(
        client, app_context["customer_email"], app_context["customer_password"]
    )
    forbidden = await client.post(
        "/api/v1/vehicles",
        json=payload,
        headers={"Authorization": f"Bearer {customer_token}"},
    )
    assert forbidden.status_code == 403

    admin_token = await _authenticate(
        client, app_context["admin_email"], app_context["admin_password"]
    )
    admin_headers = {"Authorization": f"Bearer {admin_token}"}
    created = await client.post("/api/v1/vehicles", json=payload, headers=admin_headers)
    assert created.status_code == 201
    vehicle_id = created.json()["id"]

    updated = await client.patch(
        f"/api/v1/vehicles/{vehicle_id}",
        json={"status": "MAINTENANCE"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["status"] == "MAINTENANCE"

    buses = await client.get("/api/v1/vehicles", params={"vehicle_type": "BUS"})
    assert [item["id"] for item in buses.json()] == [vehicle_id]

    missing = await client.get(
        "/api/v1/vehicles/00000000-0000-0000-0000-000000000000"
    )
    assert missing.status_code == 404
