"""
Shared pytest fixtures for device-api tests.
"""
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from device_api.core.config import Settings
from device_api.core.container import ApplicationContainer
from device_api.db import models  # noqa: F401
from device_api.infrastructure.database.base import Base
from device_api.infrastructure.database.session import dispose_engine, init_db
from device_api.infrastructure.memory import InMemoryDeviceRepository, InMemoryDeviceStore
from device_api.main import create_app
from device_api.modules.devices import DeviceService


@asynccontextmanager
async def _passthrough_transaction():
    yield


@pytest.fixture
def mock_device_repo():
    """Mock DeviceRepository with async methods and a no-op transaction()."""
    repo = AsyncMock()
    repo.transaction = MagicMock(side_effect=lambda: _passthrough_transaction())
    return repo


@pytest.fixture
def memory_store():
    return InMemoryDeviceStore()


@pytest.fixture
def make_service(memory_store):
    """Build a service over a fresh unit of work, as each request would."""

    def _make() -> DeviceService:
        return DeviceService(InMemoryDeviceRepository(memory_store))

    return _make


@pytest_asyncio.fixture
async def session_factory():
    """In-memory SQLite shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def memory_settings():
    return Settings(environment="test", storage={"backend": "memory"})


@pytest_asyncio.fixture
async def api_client(memory_settings):
    app = create_app(ApplicationContainer.build(memory_settings))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def sql_api_client(tmp_path):
    """HTTP client over the SQL backend, backed by a throwaway SQLite file."""
    # Importing device_api.main builds a default engine; start from a clean one.
    await dispose_engine()
    settings = Settings(
        environment="test",
        database={"url": f"sqlite+aiosqlite:///{tmp_path / 'devices.db'}"},
    )
    app = create_app(ApplicationContainer.build(settings))
    await init_db()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    await dispose_engine()
