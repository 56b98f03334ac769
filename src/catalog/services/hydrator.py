"""Reference hydration: replace numeric foreign keys with referenced documents."""

import asyncio
from collections.abc import Iterable, Sequence
from typing import Any, overload

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.catalog.core.logging import get_logger
from src.catalog.models.registry import CollectionRegistry, ReferenceSpec
from src.catalog.repositories.base import Document, DocumentRepository

logger = get_logger(__name__)

# (target collection, projection, sequence id)
LookupKey = tuple[str, tuple[str, ...] | None, int]


def is_reference_value(value: Any) -> bool:
    """A raw foreign key is a plain integer. Embedded documents and booleans are not."""
    return isinstance(value, int) and not isinstance(value, bool)


class ReferenceHydrator:
    """Resolve numeric foreign keys into projected sub-documents.

    The output has the same shape as the input: one document in, one out; a
    list of N in, a list of N out in the same order with None entries kept.
    References that cannot be resolved keep their raw value. Input documents
    are never mutated.
    """

    def __init__(self, database: AsyncIOMotorDatabase, registry: CollectionRegistry):
        self.database = database
        self.registry = registry

    async def _fetch(self, key: LookupKey) -> Document | None:
        target, projection, sequence_id = key
        repo = DocumentRepository(self.database, self.registry.require(target))
        return await repo.get_by_sequence_id(sequence_id, projection)

    @staticmethod
    def _lookup_keys(
        documents: Iterable[Document | None], specs: Sequence[ReferenceSpec]
    ) -> list[LookupKey]:
        keys: dict[LookupKey, None] = {}
        for document in documents:
            if document is None:
                continue
            for ref in specs:
                value = document.get(ref.field)
                if is_reference_value(value):
                    keys[(ref.target, ref.projection, value)] = None
        return list(keys)

    @overload
    async def hydrate(
        self, entities: Document, specs: Sequence[ReferenceSpec]
    ) -> Document: ...

    @overload
    async def hydrate(
        self, entities: None, specs: Sequence[ReferenceSpec]
    ) -> None: ...

    @overload
    async def hydrate(
        self, entities: Sequence[Document | None], specs: Sequence[ReferenceSpec]
    ) -> list[Document | None]: ...

    async def hydrate(self, entities: Any, specs: Sequence[ReferenceSpec]) -> Any:
        single = not isinstance(entities, (list, tuple))
        documents: list[Document | None] = [entities] if single else list(entities)

        # Each distinct (target, projection, id) is fetched once, all concurrently
        keys = self._lookup_keys(documents, specs)
        results = await asyncio.gather(*(self._fetch(key) for key in keys))
        resolved = dict(zip(keys, results, strict=True))

        hydrated: list[Document | None] = []
        for document in documents:
            if document is None:
                hydrated.append(None)
                continue

            output = dict(document)
            for ref in specs:
                value = output.get(ref.field)
                if not is_reference_value(value):
                    continue
                referenced = resolved.get((ref.target, ref.projection, value))
                if referenced is None:
                    logger.debug(
                        "Dangling reference left unhydrated",
                        field=ref.field,
                        target=ref.target,
                        value=value,
                    )
                    continue
                output[ref.field] = referenced
            hydrated.append(output)

        return hydrated[0] if single else hydrated

    async def hydrate_collection(self, collection: str, entities: Any) -> Any:
        """Hydrate using the registry's declared references for collection."""
        spec = self.registry.require(collection)
        return await self.hydrate(entities, spec.hydration_specs)
