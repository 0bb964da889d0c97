"""API tests for quoting, booking and cancelling vehicles."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from yatra.db.session import get_sessionmaker
from yatra.models import AuditEvent

pytestmark = pytest.mark.asyncio


async def _authenticate(client: AsyncClient, email: str, password: str) -> str:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    return response.json()["access_token"]


async def _headers(app_context: dict[str, object], who: str) -> dict[str, str]:
    token = await _authenticate(
        app_context["client"],
        app_context[f"{who}_email"],
        app_context[f"{who}_password"],
    )
    return {"Authorization": f"Bearer {token}"}


def _window(days_ahead: int, length: int) -> tuple[str, str]:
    start = datetime.now(UTC).replace(microsecond=0) + timedelta(days=days_ahead)
    return start.isoformat(), (start + timedelta(days=length)).isoformat()


async def _create_coupon(client: AsyncClient, headers: dict[str, str], **extra) -> None:
    payload = {
        "type": "DISCOUNT",
        "name": "Ten percent",
        "code": "SAVE10",
        "discount_source": "COUPON",
        "discount_value": "10",
        "discount_value_type": "PERCENTAGE",
    }
    payload.update(extra)
    response = await client.post("/api/v1/pricing-configs", json=payload, headers=headers)
    assert response.status_code == 201, response.text


async def test_quote_does_not_consume_coupon(app_context: dict[str, object]) -> None:
    client = app_context["client"]
    admin = await _headers(app_context, "admin")
    customer = await _headers(app_context, "customer")
    await _create_coupon(client, admin, usage_limit=1)
    start, end = _window(30, 5)

    for _ in range(2):
        quote = await client.post(
            "/api/v1/pricing/quote",
            json={
                "vehicle_id": str(app_context["vehicle_id"]),
                "start_date": start,
                "end_date": end,
                "number_of_vehicles": 2,
                "coupon_code": "SAVE10",
            },
            headers=customer,
        )
        assert quote.status_code == 200, quote.text
        assert quote.json()["total_price"] == "900.00"


async def test_booking_lifecycle(app_context: dict[str, object], db_url: str) -> None:
    client = app_context["client"]
    admin = await _headers(app_context, "admin")
    customer = await _headers(app_context, "customer")
    await _create_coupon(client, admin, max_discount="50")
    start, end = _window(2, 5)

    created = await client.post(
        "/api/v1/vehicle-bookings",
        json={
            "vehicle_id": str(app_context["vehicle_id"]),
            "start_date": start,
            "end_date": end,
            "number_of_vehicles": 2,
            "coupon_code": "SAVE10",
            "pickup_location": "Thamel",
        },
        headers=customer,
    )
    assert created.status_code == 201, created.text
    booking = created.json()
    assert booking["total_price"] == "950.00"
    assert booking["status"] == "PENDING"
    booking_id = booking["id"]

    mine = await client.get("/api/v1/vehicle-bookings", headers=customer)
    assert mine.status_code == 200
    assert mine.json()["total"] == 1
    assert mine.json()["total_pages"] == 1

    preview = await client.get(
        f"/api/v1/vehicle-bookings/{booking_id}/refund-preview", headers=customer
    )
    assert preview.status_code == 200
    assert preview.json()["refund_percentage"] == 25

    cancelled = await client.post(
        f"/api/v1/vehicle-bookings/{booking_id}/cancel",
        json={"cancellation_reason": "Flight moved"},
        headers=customer,
    )
    assert cancelled.status_code == 200, cancelled.text
    body = cancelled.json()
    assert body["booking"]["status"] == "CANCELLED"
    assert body["refund"]["refund_amount"] == "237.50"

    again = await client.post(
        f"/api/v1/vehicle-bookings/{booking_id}/cancel", json={}, headers=customer
    )
    assert again.status_code == 400

    async with get_sessionmaker(db_url)() as session:
        events = (
            await session.execute(
                select(AuditEvent.event_type, AuditEvent.payload).where(
                    AuditEvent.event_type.like("vehicle_booking.%")
                )
            )
        ).all()
    payloads = dict(events)
    assert payloads["vehicle_booking.created"]["booking_code"] == booking["booking_code"]
    assert payloads["vehicle_booking.created"]["coupon_code"] == "SAVE10"
    cancel_event = payloads["vehicle_booking.cancelled"]
    assert cancel_event["status"] == "CANCELLED"
    assert cancel_event["total_price"] == "950.00"
    assert cancel_event["refund"]["refund_amount"] == "237.50"


async def test_coupon_rejection_returns_message(app_context: dict[str, object]) -> None:
    client = app_context["client"]
    admin = await _headers(app_context, "admin")
    customer = await _headers(app_context, "customer")
    await _create_coupon(client, admin, min_booking_amount="5000")
    start, end = _window(10, 5)

    response = await client.post(
        "/api/v1/vehicle-bookings",
        json={
            "vehicle_id": str(app_context["vehicle_id"]),
            "start_date": start,
            "end_date": end,
            "number_of_vehicles": 2,
            "coupon_code": "SAVE10",
        },
        headers=customer,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == (
        "Minimum booking amount of NPR 5000 required for this coupon."
    )

    listing = await client.get("/api/v1/vehicle-bookings", headers=customer)
    assert listing.json()["total"] == 0


async def test_admin_status_flow(app_context: dict[str, object]) -> None:
    client = app_context["client"]
    admin = await _headers(app_context, "admin")
    customer = await _headers(app_context, "customer")
    start, end = _window(15, 3)

    created = await client.post(
        "/api/v1/vehicle-bookings",
        json={
            "vehicle_id": str(app_context["vehicle_id"]),
            "start_date": start,
            "end_date": end,
        },
        headers=customer,
    )
    booking_id = created.json()["id"]

    forbidden = await client.patch(
        f"/api/v1/admin/vehicle-bookings/{booking_id}/status",
        json={"status": "CONFIRMED"},
        headers=customer,
    )
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "Requires role: ADMIN"

    confirmed = await client.patch(
        f"/api/v1/admin/vehicle-bookings/{booking_id}/status",
        json={"status": "CONFIRMED"},
        headers=admin,
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "CONFIRMED"

    edit = await client.patch(
        f"/api/v1/vehicle-bookings/{booking_id}",
        json={"number_of_vehicles": 2},
        headers=customer,
    )
    assert edit.status_code == 400

    skipped = await client.patch(
        f"/api/v1/admin/vehicle-bookings/{booking_id}/status",
        json={"status": "COMPLETED"},
        headers=admin,
    )
    assert skipped.status_code == 400

    listing = await client.get(
        "/api/v1/admin/vehicle-bookings", params={"status": "CONFIRMED"}, headers=admin
    )
    assert listing.json()["total"] == 1


async def test_tour_quote_is_public(app_context: dict[str, object]) -> None:
    client = app_context["client"]
    response = await client.post(
        "/api/v1/pricing/tour-quote",
        json={
            "price_per_participant": "2500",
            "number_of_participants": 3,
            "discount_rate": "20",
        },
    )
    assert response.status_code == 200
    assert response.json() == {
        "total_price": "6000.00",
        "discount_price": "1500.00",
        "guide_total_price": None,
    }
