"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import sys
import os
from unittest.mock import MagicMock
import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from enums.currency import Currency
from enums.runtime_environment import RuntimeEnvironment

# Mock config module completely before any imports
config_mock = MagicMock()
config_mock.RUNTIME_ENVIRONMENT = RuntimeEnvironment.TEST
config_mock.CURRENCY = Currency.MUR
config_mock.DB_URL = "sqlite+aiosqlite:///:memory:"  # In-memory test database
config_mock.REDIS_HOST = "localhost"
config_mock.REDIS_PASSWORD = None
config_mock.WEBAPP_HOST = "127.0.0.1"
config_mock.WEBAPP_PORT = 8000
config_mock.STOREFRONT_URL = "http://localhost:3000"
config_mock.CATALOG_API_URL = "http://catalog.test"
config_mock.CATALOG_PAGE_SIZE = 20
config_mock.SEARCH_DEBOUNCE_MS = 500
config_mock.TAX_RATE = "0.15"
config_mock.SHIPPING_COUNTRY = "mu"
config_mock.DEFAULT_DELIVERY_DAYS = 5
config_mock.STORE_LANGUAGE = "en"  # For Localizator
config_mock.CART_TTL_HOURS = 72
config_mock.MAX_ORDERS_PER_USER_PER_HOUR = 5
config_mock.MAX_PARTNER_APPLICATIONS_PER_HOUR = 3
config_mock.MAX_QUOTE_REQUESTS_PER_HOUR = 5
config_mock.QUOTE_VALIDITY_DAYS = 7
config_mock.EMAIL_HOST = ""  # Delivery skipped unless a test patches it
config_mock.EMAIL_PORT = 587
config_mock.EMAIL_USER = "shop@example.mu"
config_mock.EMAIL_PASS = "test_password"
config_mock.EMAIL_USE_TLS = True
config_mock.EMAIL_FROM_NAME = "Auto Parts Mauritius"
config_mock.ADMIN_EMAIL = "admin@example.mu"
config_mock.LOG_LEVEL = "INFO"
config_mock.LOG_MASK_SECRETS = True
config_mock.LOG_RETENTION_DAYS = 5
config_mock.SECURITY_HEADERS_ENABLED = True
config_mock.CSP_ENABLED = False
config_mock.HSTS_ENABLED = False
config_mock.CORS_ALLOWED_ORIGINS = []

sys.modules['config'] = config_mock


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine (in-memory SQLite)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False
    )

    # Import and create all tables
    from db import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine):
    """Create test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


# ============================================================================
# Redis Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def redis_client():
    """Create fake Redis client for testing (no real Redis server needed)."""
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.aclose()


# ============================================================================
# Seed Data Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def customer(test_session):
    """Active customer account."""
    from enums.user_role import UserRole
    from models.user import UserDTO
    from repositories.user import UserRepository

    user_id = await UserRepository.create(
        UserDTO(email="jean@example.mu", name="Jean Dupont", role=UserRole.CUSTOMER, is_active=True),
        test_session
    )
    await test_session.commit()
    return await UserRepository.get_by_id(user_id, test_session)


@pytest_asyncio.fixture
async def admin(test_session):
    """Active admin account."""
    from enums.user_role import UserRole
    from models.user import UserDTO
    from repositories.user import UserRepository

    user_id = await UserRepository.create(
        UserDTO(email="staff@example.mu", name="Store Staff", role=UserRole.ADMIN, is_active=True),
        test_session
    )
    await test_session.commit()
    return await UserRepository.get_by_id(user_id, test_session)


@pytest.fixture
def make_part(test_session):
    """Factory inserting a catalog part; keyword arguments override the defaults."""
    from models.part import PartDTO
    from repositories.part import PartRepository

    counter = {"n": 0}

    async def _make_part(**overrides):
        counter["n"] += 1
        values = {
            "part_number": f"TOY-BRK-{counter['n']:03d}",
            "name": "Brake Pad Set",
            "description": "Front ceramic brake pads",
            "category": "Brakes",
            "brand": "Bosch",
            "vehicle_make": "Toyota",
            "price_cents": 8999,
            "stock": 10,
        }
        values.update(overrides)
        part = await PartRepository.create(PartDTO(**values), test_session)
        await test_session.commit()
        return part

    return _make_part
