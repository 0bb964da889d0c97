"""Administration of seasonal, driver and discount configurations."""
from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.core.clock import coerce_utc
from yatra.models.pricing import (
    DiscountPricing,
    DriverPricing,
    PricingConfig,
    PricingConfigType,
    SeasonalPricing,
)
from yatra.schemas.pricing_config import PricingConfigCreate, PricingConfigUpdate

_MODEL_BY_TYPE: dict[PricingConfigType, type[PricingConfig]] = {
    PricingConfigType.SEASONAL: SeasonalPricing,
    PricingConfigType.DRIVER: DriverPricing,
    PricingConfigType.DISCOUNT: DiscountPricing,
}

_VARIANT_FIELDS: dict[PricingConfigType, set[str]] = {
    PricingConfigType.SEASONAL: {"price_multiplier"},
    PricingConfigType.DRIVER: {"base_driver_rate", "price_per_km", "terrain_multiplier"},
    PricingConfigType.DISCOUNT: {
        "code",
        "discount_value",
        "discount_value_type",
        "max_discount",
        "min_booking_amount",
        "min_days",
        "usage_limit",
        "per_user_limit",
    },
}


def _normalize(values: dict[str, Any]) -> dict[str, Any]:
    for key in ("valid_from", "valid_until"):
        if values.get(key) is not None:
            values[key] = coerce_utc(values[key])
    if values.get("vehicle_types") is not None:
        values["vehicle_types"] = [str(getattr(vt, "value", vt)) for vt in values["vehicle_types"]]
    return values


async def list_configs(
    session: AsyncSession,
    *,
    config_type: PricingConfigType | None = None,
    active_only: bool = False,
) -> Sequence[PricingConfig]:
    model = _MODEL_BY_TYPE[config_type] if config_type else PricingConfig
    stmt = select(model).order_by(model.priority.desc(), model.created_at.asc())
    if active_only:
        stmt = stmt.where(model.is_active.is_(True))
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_config(session: AsyncSession, config_id: uuid.UUID) -> PricingConfig | None:
    return await session.get(PricingConfig, config_id)


async def _ensure_unique_code(
    session: AsyncSession, code: str | None, *, exclude_id: uuid.UUID | None = None
) -> None:
    if not code:
        return
    stmt = select(DiscountPricing.id).where(DiscountPricing.code == code)
    if exclude_id is not None:
        stmt = stmt.where(DiscountPricing.id != exclude_id)
    if (await session.execute(stmt)).first() is not None:
        raise ValueError(f"Coupon code {code} already exists")


async def create_config(
    session: AsyncSession, payload: PricingConfigCreate
) -> PricingConfig:
    config_type = PricingConfigType(payload.type)
    values = _normalize(payload.model_dump(exclude={"type"}))
    if config_type is PricingConfigType.DISCOUNT:
        await _ensure_unique_code(session, values.get("code"))
        values["usage_count"] = 0

    config = _MODEL_BY_TYPE[config_type](**values)
    session.add(config)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise
    await session.refresh(config)
    return config


async def update_config(
    session: AsyncSession, config: PricingConfig, payload: PricingConfigUpdate
) -> PricingConfig:
    values = _normalize(payload.model_dump(exclude_unset=True))
    foreign = {
        name
        for variant, names in _VARIANT_FIELDS.items()
        if variant != config.config_type
        for name in names
    } - _VARIANT_FIELDS[config.config_type]
    rejected = sorted(set(values) & foreign)
    if rejected:
        raise ValueError(
            f"Fields not applicable to {config.config_type.value} configs: "
            + ", ".join(rejected)
        )
    if "code" in values:
        await _ensure_unique_code(session, values["code"], exclude_id=config.id)

    for field, value in values.items():
        setattr(config, field, value)

    if (
        config.valid_from is not None
        and config.valid_until is not None
        and coerce_utc(config.valid_until) < coerce_utc(config.valid_from)
    ):
        await session.rollback()
        raise ValueError("valid_until must not be before valid_from")

    await session.commit()
    await session.refresh(config)
    return config


async def delete_config(session: AsyncSession, config: PricingConfig) -> None:
    await session.delete(config)
    await session.commit()
