"""MongoDB client lifecycle.

One motor client per process, created lazily and closed in the application
lifespan. Explicit client-side timeouts keep a slow or unreachable server from
hanging request handlers indefinitely.
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from src.catalog.core.config import get_settings
from src.catalog.core.logging import get_logger

logger = get_logger(__name__)

_client: AsyncIOMotorClient | None = None


def get_client() -> AsyncIOMotorClient:
    """Get the process-wide Mongo client, creating it on first use."""
    global _client

    if _client is None:
        settings = get_settings()
        _client = AsyncIOMotorClient(
            settings.mongodb_url,
            timeoutMS=settings.mongodb_timeout_ms,
            serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
            maxPoolSize=settings.mongodb_max_pool_size,
            tz_aware=True,
        )
        logger.info("MongoDB client created", database=settings.mongodb_database)
    return _client


def get_database() -> AsyncIOMotorDatabase:
    """Get the configured catalog database."""
    return get_client()[get_settings().mongodb_database]


async def ping() -> bool:
    """Round-trip to the server. Raises on failure."""
    await get_client().admin.command("ping")
    return True


def close_mongo() -> None:
    """Close the Mongo client. Safe to call when nothing is connected."""
    global _client

    if _client is not None:
        _client.close()
        logger.info("MongoDB client closed")
    _client = None
