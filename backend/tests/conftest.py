"""
Pytest configuration and fixtures.

Pure modules are tested directly; services run against an in-memory
SQLite database (aiosqlite) built from the SQLAlchemy metadata; the
HTTP layer goes through httpx.AsyncClient with the session dependency
overridden.
"""

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from invoicer.core.database import get_db
from invoicer.core.security import create_access_token
from invoicer.models import Base, Product, ProductVariation, StoreSettings


# ============================================================
# AsyncSession mock
# ============================================================


@pytest.fixture
def mock_db():
    """AsyncSession mock for unit-of-work tests."""
    db = AsyncMock(spec=AsyncSession)
    db.execute = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.delete = AsyncMock()
    return db


# ============================================================
# SQLite database
# ============================================================


@pytest.fixture
async def engine():
    """In-memory database with the full schema, one per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ============================================================
# Users and catalog
# ============================================================


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def other_user_id() -> uuid.UUID:
    return uuid.uuid4()


@dataclass
class Catalog:
    """Seeded catalog: one product with a user variation and a default one."""

    product: Product
    banner: ProductVariation        # 10.00, owned by the test user
    default_banner: ProductVariation  # 7.50, default catalog (user_id NULL)


@pytest.fixture
async def catalog(db, user_id) -> Catalog:
    product = Product(name="Vinyl Banner", description="Outdoor banner")
    db.add(product)
    await db.flush()

    banner = ProductVariation(
        product_id=product.id,
        user_id=user_id,
        size="3x6",
        accessory="Grommets",
        price=Decimal("10.00"),
    )
    default_banner = ProductVariation(
        product_id=product.id,
        user_id=None,
        size="2x4",
        price=Decimal("7.50"),
    )
    db.add_all([banner, default_banner])
    await db.commit()
    # Services must load the catalog themselves (with its eager relationships)
    db.expunge_all()
    return Catalog(product=product, banner=banner, default_banner=default_banner)


@pytest.fixture
async def tax_rate(db, user_id):
    """Store settings for the test user with an explicit 10% tax rate."""
    settings_row = StoreSettings(user_id=user_id, name="Sign Shop", tax_rate=Decimal("0.10"))
    db.add(settings_row)
    await db.commit()
    return settings_row


# ============================================================
# HTTP client
# ============================================================


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token(str(user_id))}"}


@pytest.fixture
def other_auth_headers(other_user_id):
    return {"Authorization": f"Bearer {create_access_token(str(other_user_id))}"}


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """API client bound to the test database."""
    from invoicer.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
