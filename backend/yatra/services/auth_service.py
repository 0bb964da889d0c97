"""Customer registration and credential checks."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from yatra.core.security import create_access_token, verify_password
from yatra.models.user import User, UserRole, UserStatus
from yatra.schemas.auth import RegistrationRequest
from yatra.schemas.user import UserCreate
from yatra.services import user_service

logger = logging.getLogger(__name__)


class EmailAlreadyRegistered(ValueError):
    def __init__(self) -> None:
        super().__init__("Email already registered")


async def authenticate_user(
    session: AsyncSession, email: str, password: str
) -> User | None:
    """Return the active user matching the credentials, else ``None``."""
    user = await user_service.get_user_by_email(session, email=email.lower())
    if user is None or user.status != UserStatus.ACTIVE:
        return None
    if not verify_password(password, user.hashed_password):
        logger.info("Rejected login for user %s", user.id)
        return None
    return user


async def register_customer(
    session: AsyncSession, payload: RegistrationRequest
) -> User:
    """Create a CUSTOMER account; emails are unique case-insensitively."""
    existing = await user_service.get_user_by_email(session, email=payload.email.lower())
    if existing is not None:
        raise EmailAlreadyRegistered()
    try:
        return await user_service.create_user(
            session,
            UserCreate(
                email=payload.email,
                password=payload.password,
                full_name=payload.full_name,
                phone=payload.phone,
                role=UserRole.CUSTOMER,
            ),
        )
    except IntegrityError as exc:
        raise EmailAlreadyRegistered() from exc


def create_access_token_for_user(user: User) -> str:
    return create_access_token(str(user.id), role=user.role.value)
