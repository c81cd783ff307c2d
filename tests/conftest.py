"""Pytest configuration and fixtures for the catalogue service."""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("CATALOG_CACHE_ENABLED", "false")

import pytest
import pytest_asyncio
from fakeredis import aioredis as fakeredis
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from regalia.core.cache import cache
from regalia.core.database import get_db
from regalia.models import Base


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


@pytest_asyncio.fixture()
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db(session_factory):
    """Session used by tests to seed and query data."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def redis_client():
    """Provide a fake Redis client attached to the global cache."""
    client = fakeredis.FakeRedis()
    cache.use_client(client)
    try:
        yield client
    finally:
        await client.flushdb()
        await cache.disconnect()


@pytest_asyncio.fixture()
async def client(session_factory):
    """Return an HTTPX async client pointing at the FastAPI app."""
    from regalia.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://testserver",
        ) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_db, None)
