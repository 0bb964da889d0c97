"""Bootstrap helpers for default data."""

from __future__ import annotations

import logging

from yatra.core.config import get_settings
from yatra.db.session import get_sessionmaker
from yatra.models import User, UserRole, UserStatus
from yatra.schemas.user import UserCreate
from yatra.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_NAME = "Yatra Administrator"


async def ensure_default_admin() -> User | None:
    """Create the configured admin user if it does not yet exist."""

    settings = get_settings()
    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        return None

    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        existing = await get_user_by_email(
            session, settings.bootstrap_admin_email.lower()
        )
        if existing is not None:
            return existing

        payload = UserCreate(
            email=settings.bootstrap_admin_email,
            password=settings.bootstrap_admin_password,
            full_name=DEFAULT_ADMIN_NAME,
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
        )
        user = await create_user(session, payload)
        logger.info("Bootstrapped admin user %s", user.email)
        return user
