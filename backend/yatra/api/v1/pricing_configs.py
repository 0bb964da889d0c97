"""Pricing configuration administration."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.api import deps
from yatra.models.pricing import PricingConfig, PricingConfigType
from yatra.models.user import User
from yatra.schemas.pricing_config import (
    PricingConfigCreate,
    PricingConfigRead,
    PricingConfigUpdate,
)
from yatra.services import pricing_config_service

router = APIRouter()


async def _get_config_or_404(session: AsyncSession, config_id: uuid.UUID) -> PricingConfig:
    config = await pricing_config_service.get_config(session, config_id)
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Pricing config not found"
        )
    return config


@router.get("", response_model=list[PricingConfigRead], summary="List pricing configs")
async def list_pricing_configs(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
    config_type: Annotated[PricingConfigType | None, Query(alias="type")] = None,
    active_only: bool = False,
) -> list[PricingConfigRead]:
    configs = await pricing_config_service.list_configs(
        session, config_type=config_type, active_only=active_only
    )
    return [PricingConfigRead.model_validate(config) for config in configs]


@router.post(
    "",
    response_model=PricingConfigRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create pricing config",
)
async def create_pricing_config(
    payload: Annotated[PricingConfigCreate, Body(discriminator="type")],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> PricingConfigRead:
    try:
        config = await pricing_config_service.create_config(session, payload)
    except (ValueError, IntegrityError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return PricingConfigRead.model_validate(config)


@router.get(
    "/{config_id}", response_model=PricingConfigRead, summary="Get pricing config"
)
async def get_pricing_config(
    config_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> PricingConfigRead:
    config = await _get_config_or_404(session, config_id)
    return PricingConfigRead.model_validate(config)


@router.patch(
    "/{config_id}", response_model=PricingConfigRead, summary="Update pricing config"
)
async def update_pricing_config(
    config_id: uuid.UUID,
    payload: PricingConfigUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> PricingConfigRead:
    config = await _get_config_or_404(session, config_id)
    try:
        config = await pricing_config_service.update_config(session, config, payload)
    except (ValueError, IntegrityError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return PricingConfigRead.model_validate(config)


@router.delete(
    "/{config_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete pricing config",
)
async def delete_pricing_config(
    config_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> Response:
    config = await _get_config_or_404(session, config_id)
    await pricing_config_service.delete_config(session, config)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
