"""Store dependencies."""

from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from src.catalog.core.config import get_settings
from src.catalog.core.mongo import get_database
from src.catalog.core.redis import get_redis
from src.catalog.repositories.sequence import (
    MongoSequenceGenerator,
    RedisSequenceGenerator,
    SequenceGenerator,
)


def get_db() -> AsyncIOMotorDatabase:
    """Get the catalog database."""
    return get_database()


DB = Annotated[AsyncIOMotorDatabase, Depends(get_db)]


async def get_sequence_generator(database: DB) -> SequenceGenerator:
    """Pick the configured counter backend."""
    settings = get_settings()
    if settings.sequence_backend == "redis":
        return RedisSequenceGenerator(await get_redis(), settings.redis_sequence_prefix)
    return MongoSequenceGenerator(database, settings.counters_collection)


Sequences = Annotated[SequenceGenerator, Depends(get_sequence_generator)]
