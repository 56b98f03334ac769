"""Per-collection sequence id generators.

Both backends rely on a single atomic increment-and-read on the server, so
concurrent callers targeting the same collection never receive the same value.
"""

from typing import Protocol

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.catalog.core.exceptions import SequenceGenerationError
from src.catalog.core.logging import get_logger

logger = get_logger(__name__)


class SequenceGenerator(Protocol):
    async def next_id(self, collection: str) -> int: ...

    async def current(self, collection: str) -> int: ...


def _validated(collection: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise SequenceGenerationError(collection, f"counter returned {value!r}")
    return value


class MongoSequenceGenerator:
    """Counters stored as `{_id: <collection>, seq: <last issued>}` documents."""

    def __init__(self, database: AsyncIOMotorDatabase, counters_collection: str = "counters"):
        self.counters = database[counters_collection]

    async def next_id(self, collection: str) -> int:
        # Two first-time upserts can race on the unique _id; the loser retries
        # against the now-existing counter.
        for attempt in range(2):
            try:
                counter = await self.counters.find_one_and_update(
                    {"_id": collection},
                    {"$inc": {"seq": 1}},
                    upsert=True,
                    return_document=ReturnDocument.AFTER,
                )
                break
            except DuplicateKeyError:
                if attempt:
                    raise SequenceGenerationError(collection, "counter upsert conflict") from None
            except PyMongoError as e:
                logger.error("Sequence increment failed", collection=collection, error=str(e))
                raise SequenceGenerationError(collection, str(e)) from e

        return _validated(collection, counter.get("seq") if counter else None)

    async def current(self, collection: str) -> int:
        """Last issued value, 0 when nothing has been issued yet."""
        counter = await self.counters.find_one({"_id": collection})
        return int(counter["seq"]) if counter else 0


class RedisSequenceGenerator:
    """Counters stored as plain Redis integers advanced with INCR."""

    def __init__(self, redis: Redis | None, prefix: str = "catalog:seq:"):
        self.redis = redis
        self.prefix = prefix

    def _key(self, collection: str) -> str:
        return f"{self.prefix}{collection}"

    async def next_id(self, collection: str) -> int:
        if self.redis is None:
            raise SequenceGenerationError(collection, "Redis is not available")
        try:
            value = await self.redis.incr(self._key(collection))
        except RedisError as e:
            logger.error("Sequence increment failed", collection=collection, error=str(e))
            raise SequenceGenerationError(collection, str(e)) from e
        return _validated(collection, int(value))

    async def current(self, collection: str) -> int:
        if self.redis is None:
            raise SequenceGenerationError(collection, "Redis is not available")
        value = await self.redis.get(self._key(collection))
        return int(value) if value is not None else 0
