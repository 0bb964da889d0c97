"""Test fixtures for the Yatra booking backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from yatra.core.config import get_settings
from yatra.core.security import get_password_hash
from yatra.db.base import Base
from yatra.db.session import dispose_engine, get_sessionmaker
from yatra.main import app
from yatra.models import (
    User,
    UserRole,
    UserStatus,
    Vehicle,
    VehicleStatus,
    VehicleType,
)


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def app_context(
    reset_database: AsyncIterator[None], db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client plus a seeded admin, customer and vehicle."""
    sessionmaker = get_sessionmaker(db_url)
    admin_password = "Adm1nPass!"
    customer_password = "Cust0merPass!"

    async with sessionmaker() as session:
        admin = User(
            email="admin@example.com",
            hashed_password=get_password_hash(admin_password),
            full_name="Asha Admin",
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
        )
        customer = User(
            email="customer@example.com",
            hashed_password=get_password_hash(customer_password),
            full_name="Bikash Customer",
            role=UserRole.CUSTOMER,
            status=UserStatus.ACTIVE,
        )
        vehicle = Vehicle(
            vehicle_type=VehicleType.SUV,
            brand="Toyota",
            model="Prado",
            seat_capacity=7,
            price_per_day=Decimal("100.00"),
            total_quantity=2,
            status=VehicleStatus.AVAILABLE,
            city="Kathmandu",
            region="Bagmati",
        )
        session.add_all([admin, customer, vehicle])
        await session.commit()

        context = {
            "admin_id": admin.id,
            "admin_email": admin.email,
            "admin_password": admin_password,
            "customer_id": customer.id,
            "customer_email": customer.email,
            "customer_password": customer_password,
            "vehicle_id": vehicle.id,
        }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context
