"""Dual-mode identifier resolution: native object id first, then sequence id."""

import re
from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from src.catalog.core.exceptions import InvalidIdentifier
from src.catalog.models.registry import CollectionRegistry
from src.catalog.repositories.base import Document, DocumentRepository

NATIVE_KEY_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
INTEGER_PATTERN = re.compile(r"^-?[0-9]+$")

# BSON integers are signed 64-bit
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def is_native_key(raw_id: str) -> bool:
    return bool(NATIVE_KEY_PATTERN.match(raw_id))


def parse_integer(raw: Any) -> int | None:
    """Parse an int or an ASCII base-10 numeric string, else None. Unbounded."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if INTEGER_PATTERN.match(text):
            return int(text)
    return None


def parse_sequence_id(raw: Any) -> int | None:
    """Parse an integer the store can hold, else None."""
    value = parse_integer(raw)
    if value is None or not INT64_MIN <= value <= INT64_MAX:
        return None
    return value


class IdentifierResolver:
    """Look up a document from an untrusted caller-supplied id.

    Precedence is fixed: a 24-hex-character string is always a native key,
    even when it is made only of digits and a matching sequence id exists.
    """

    def __init__(self, database: AsyncIOMotorDatabase, registry: CollectionRegistry):
        self.database = database
        self.registry = registry

    def selector(self, collection: str, raw_id: str) -> Document:
        """Build the store selector for raw_id without touching the store."""
        spec = self.registry.require(collection)
        if not isinstance(raw_id, str):
            raw_id = str(raw_id)

        text = raw_id.strip()
        if is_native_key(text):
            return {"_id": ObjectId(text)}

        sequence_id = parse_sequence_id(text)
        if sequence_id is None:
            raise InvalidIdentifier(collection, raw_id)
        return {spec.sequence_field: sequence_id}

    async def resolve(self, collection: str, raw_id: str) -> Document | None:
        """Return the matching document, or None when nothing matches."""
        selector = self.selector(collection, raw_id)
        repo = DocumentRepository(self.database, self.registry.require(collection))
        if "_id" in selector:
            return await repo.get_by_native_key(selector["_id"])
        return await repo.get_by_sequence_id(selector[repo.spec.sequence_field])
