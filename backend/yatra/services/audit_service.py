"""Audit trail for logins, registrations and booking changes."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from yatra.core.money import money_str
from yatra.models.audit_event import AuditEvent
from yatra.models.vehicle_booking import VehicleBooking


@dataclass(slots=True, frozen=True)
class BookingAuditPayload:
    """Snapshot of a booking stored alongside its audit event."""

    booking_id: str
    booking_code: str
    vehicle_id: str
    status: str
    total_price: str
    coupon_code: str | None

    @classmethod
    def from_booking(cls, booking: VehicleBooking) -> "BookingAuditPayload":
        return cls(
            booking_id=str(booking.id),
            booking_code=booking.booking_code,
            vehicle_id=str(booking.vehicle_id),
            status=booking.status.value,
            total_price=money_str(booking.total_price),
            coupon_code=booking.coupon_code,
        )


async def record_event(
    session: AsyncSession,
    *,
    event_type: str,
    user_id: uuid.UUID | None = None,
    description: str | None = None,
    payload: dict[str, Any] | None = None,
    ip_address: str | None = None,
) -> AuditEvent:
    event = AuditEvent(
        user_id=user_id,
        event_type=event_type,
        description=description,
        payload=payload,
        ip_address=ip_address,
    )
    session.add(event)
    await session.commit()
    await session.refresh(event)
    return event


async def record_booking_event(
    session: AsyncSession,
    *,
    booking: VehicleBooking,
    event_type: str,
    actor_id: uuid.UUID | None,
    description: str,
    ip_address: str | None = None,
    extra: dict[str, Any] | None = None,
) -> AuditEvent:
    """Record ``event_type`` with the booking snapshot merged into ``extra``."""
    payload = asdict(BookingAuditPayload.from_booking(booking))
    if extra:
        payload.update(extra)
    return await record_event(
        session,
        event_type=event_type,
        user_id=actor_id,
        description=description,
        payload=payload,
        ip_address=ip_address,
    )
