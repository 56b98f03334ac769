"""Document repository with the store primitives the catalog relies on."""

from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument

from src.catalog.models.registry import CollectionSpec

Document = dict[str, Any]
SortSpec = list[tuple[str, int]]


def build_projection(fields: tuple[str, ...] | None, sequence_field: str) -> Document | None:
    """Translate a field allow-list into a Mongo projection.

    None means the whole document. The sequence field is always included and
    `_id` is excluded unless it is explicitly listed.
    """
    if fields is None:
        return None
    projection: Document = {name: 1 for name in fields}
    projection[sequence_field] = 1
    if "_id" not in fields:
        projection["_id"] = 0
    return projection


class DocumentRepository:
    """Data access for one registered collection.

    Repositories handle data access only; referential checks and hydration
    live in the service layer.
    """

    def __init__(self, database: AsyncIOMotorDatabase, spec: CollectionSpec):
        self.database = database
        self.spec = spec

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self.database[self.spec.name]

    async def get_by_native_key(self, key: ObjectId) -> Document | None:
        """Get a document by its storage-native primary key."""
        return await self.collection.find_one({"_id": key})

    async def get_by_sequence_id(
        self,
        sequence_id: int,
        projection: tuple[str, ...] | None = None,
    ) -> Document | None:
        """Get a document by its collection-scoped sequence id."""
        return await self.collection.find_one(
            {self.spec.sequence_field: sequence_id},
            build_projection(projection, self.spec.sequence_field),
        )

    async def find(
        self,
        filter: Document,
        *,
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> list[Document]:
        """Return one window of documents matching a filter."""
        cursor = self.collection.find(filter, sort=sort, skip=skip, limit=limit)
        return await cursor.to_list(length=limit)

    async def count(self, filter: Document) -> int:
        return await self.collection.count_documents(filter)

    async def insert(self, document: Document) -> Document:
        """Insert a document and return it with its generated `_id`."""
        result = await self.collection.insert_one(document)
        return {**document, "_id": result.inserted_id}

    async def update(self, selector: Document, changes: Document) -> Document | None:
        """Apply `$set` changes to one document and return the new version."""
        return await self.collection.find_one_and_update(
            selector,
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
