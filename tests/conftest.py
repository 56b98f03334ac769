"""Root test fixtures shared across all test types.

MongoDB is replaced by mongomock-motor and Redis by fakeredis, so the suite
runs without external services.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("MONGODB_DATABASE", "catalog_test")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import AsyncGenerator

import pytest
from fakeredis import aioredis as fakeredis_aio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient
from redis.asyncio import Redis

from src.catalog.api.dependencies.db import get_db
from src.catalog.core import redis as redis_core
from src.catalog.core.config import get_settings
from src.catalog.models import CollectionRegistry, get_registry
from src.catalog.repositories.sequence import MongoSequenceGenerator
from src.catalog.services.entity_service import EntityService

get_settings.cache_clear()


# --- Store fixtures ---


@pytest.fixture
def mongo_client() -> AsyncMongoMockClient:
    """In-memory Mongo client with the motor API."""
    return AsyncMongoMockClient()


@pytest.fixture
def database(mongo_client: AsyncMongoMockClient):  # type: ignore[no-untyped-def]
    return mongo_client["catalog_test"]


@pytest.fixture
def registry() -> CollectionRegistry:
    return get_registry()


@pytest.fixture
def sequences(database) -> MongoSequenceGenerator:  # type: ignore[no-untyped-def]
    return MongoSequenceGenerator(database)


@pytest.fixture
def entity_service(database, registry, sequences) -> EntityService:  # type: ignore[no-untyped-def]
    return EntityService(database, registry, sequences)


# --- Redis Test Fixtures (shared) ---


@pytest.fixture
async def fake_redis() -> AsyncGenerator[Redis]:
    """Provides a fakeredis client for testing."""
    client = fakeredis_aio.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
async def mock_redis(fake_redis: Redis, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[Redis]:
    """Patches get_redis() to return the fakeredis client everywhere it is imported."""
    await redis_core.close_redis()

    async def _get_fake_redis() -> Redis:
        return fake_redis

    monkeypatch.setattr("src.catalog.core.redis.get_redis", _get_fake_redis)
    monkeypatch.setattr("src.catalog.api.dependencies.db.get_redis", _get_fake_redis)
    yield fake_redis
    await redis_core.close_redis()


@pytest.fixture
async def mock_redis_unavailable(monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[None]:
    """Patches get_redis() to return None (simulates Redis unavailable)."""
    await redis_core.close_redis()

    async def _get_none() -> None:
        return None

    monkeypatch.setattr("src.catalog.core.redis.get_redis", _get_none)
    monkeypatch.setattr("src.catalog.api.dependencies.db.get_redis", _get_none)
    yield
    await redis_core.close_redis()


# --- HTTP fixtures ---


@pytest.fixture
async def client(database) -> AsyncGenerator[AsyncClient]:  # type: ignore[no-untyped-def]
    """HTTP client against the app with the in-memory database injected."""
    from src.catalog.main import create_app

    app = create_app()
    app.dependency_overrides[get_db] = lambda: database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# --- Seed helpers ---


@pytest.fixture
def seed(entity_service: EntityService):  # type: ignore[no-untyped-def]
    """Create an entity through the service and return it."""

    async def _seed(collection: str, actor_id: int | None = None, **fields):  # type: ignore[no-untyped-def]
        return await entity_service.create(collection, fields, actor_id)

    return _seed
