"""Entity service: guard before write, id before insert, hydrate before return."""

import asyncio
from collections.abc import Mapping
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.catalog.core.exceptions import (
    EntityNotFound,
    InvalidIdentifier,
    MissingActor,
    UnknownReference,
)
from src.catalog.core.logging import get_logger
from src.catalog.models.base import utc_now
from src.catalog.models.registry import (
    CREATED_AT,
    CREATED_BY,
    UPDATED_AT,
    UPDATED_BY,
    CollectionRegistry,
    CollectionSpec,
)
from src.catalog.repositories.base import Document, DocumentRepository
from src.catalog.repositories.sequence import SequenceGenerator
from src.catalog.schemas.pagination import PaginationMeta
from src.catalog.services.existence_guard import ExistenceGuard
from src.catalog.services.hydrator import ReferenceHydrator
from src.catalog.services.identifier_resolver import IdentifierResolver, parse_sequence_id
from src.catalog.services.query_builder import QueryBuilder, coerce_bool

logger = get_logger(__name__)


class EntityService:
    """CRUD over any registered collection."""

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        registry: CollectionRegistry,
        sequences: SequenceGenerator,
        query_builder: QueryBuilder | None = None,
    ):
        self.database = database
        self.registry = registry
        self.sequences = sequences
        self.query_builder = query_builder or QueryBuilder()
        self.resolver = IdentifierResolver(database, registry)
        self.guard = ExistenceGuard(database, registry)
        self.hydrator = ReferenceHydrator(database, registry)

    def _repository(self, spec: CollectionSpec) -> DocumentRepository:
        return DocumentRepository(self.database, spec)

    @staticmethod
    def _writable(spec: CollectionSpec, payload: Mapping[str, Any]) -> Document:
        data = {k: v for k, v in payload.items() if k not in spec.server_managed_fields}
        if spec.active_field in data:
            flag = coerce_bool(data[spec.active_field])
            if flag is None:
                del data[spec.active_field]
            else:
                data[spec.active_field] = flag
        return data

    async def create(
        self,
        collection: str,
        payload: Mapping[str, Any],
        actor_id: int | None = None,
    ) -> Document:
        spec = self.registry.require(collection)
        data = self._writable(spec, payload)
        data.update(await self.guard.check_references(spec, data))

        # No id, no insert
        sequence_id = await self.sequences.next_id(spec.name)

        now = utc_now()
        document = {
            spec.active_field: True,
            **data,
            spec.sequence_field: sequence_id,
            CREATED_BY: actor_id,
            UPDATED_BY: None,
            CREATED_AT: now,
            UPDATED_AT: now,
        }
        inserted = await self._repository(spec).insert(document)
        logger.info(
            "Entity created",
            collection=spec.name,
            sequence_id=sequence_id,
            id=str(inserted["_id"]),
        )
        return await self.hydrator.hydrate(inserted, spec.hydration_specs)

    async def get(self, collection: str, raw_id: str) -> Document:
        spec = self.registry.require(collection)
        document = await self.resolver.resolve(collection, raw_id)
        if document is None:
            raise EntityNotFound(collection, raw_id, spec.label)
        return await self.hydrator.hydrate(document, spec.hydration_specs)

    async def list_entities(
        self,
        collection: str,
        params: Mapping[str, Any],
        base_filter: Document | None = None,
    ) -> tuple[list[Document | None], PaginationMeta]:
        spec = self.registry.require(collection)
        plan = self.query_builder.build(params, spec, base_filter)
        repo = self._repository(spec)

        documents, total = await asyncio.gather(
            repo.find(plan.filter, sort=plan.sort, skip=plan.skip, limit=plan.limit),
            repo.count(plan.filter),
        )
        items = await self.hydrator.hydrate(documents, spec.hydration_specs)
        logger.debug("Entities listed", collection=spec.name, count=len(items), total=total)
        return items, self.query_builder.meta(plan.page, plan.limit, total)

    async def list_by_reference(
        self,
        collection: str,
        field: str,
        raw_value: str,
        params: Mapping[str, Any],
    ) -> tuple[list[Document | None], PaginationMeta]:
        """List entities pointing at one referenced entity, which must exist."""
        spec = self.registry.require(collection)
        ref = spec.reference(field)
        if ref is None:
            raise UnknownReference(collection, field)

        value = parse_sequence_id(raw_value)
        if value is None:
            raise InvalidIdentifier(ref.target, raw_value, field=field)

        exists = await self.guard.ensure_exists(
            ref.target, value, required=True, require_active=ref.require_active
        )
        if not exists:
            raise EntityNotFound(ref.target, value, ref.display_name)

        return await self.list_entities(collection, params, base_filter={field: value})

    async def list_by_creator(
        self,
        collection: str,
        actor_id: int | None,
        params: Mapping[str, Any],
    ) -> tuple[list[Document | None], PaginationMeta]:
        if actor_id is None:
            raise MissingActor()
        return await self.list_entities(collection, params, base_filter={CREATED_BY: actor_id})

    async def update(
        self,
        collection: str,
        raw_id: str,
        payload: Mapping[str, Any],
        actor_id: int | None = None,
    ) -> Document:
        spec = self.registry.require(collection)
        selector = self.resolver.selector(collection, raw_id)

        changes = self._writable(spec, payload)
        changes.update(await self.guard.check_references(spec, changes, partial=True))
        changes[UPDATED_BY] = actor_id
        changes[UPDATED_AT] = utc_now()

        updated = await self._repository(spec).update(selector, changes)
        if updated is None:
            raise EntityNotFound(collection, raw_id, spec.label)

        logger.info(
            "Entity updated",
            collection=spec.name,
            sequence_id=updated.get(spec.sequence_field),
            fields=sorted(changes),
        )
        return await self.hydrator.hydrate(updated, spec.hydration_specs)

    async def deactivate(
        self,
        collection: str,
        raw_id: str,
        actor_id: int | None = None,
    ) -> Document:
        """Soft delete: flip the active flag. Dependents are left untouched."""
        spec = self.registry.require(collection)
        selector = self.resolver.selector(collection, raw_id)

        updated = await self._repository(spec).update(
            selector,
            {
                spec.active_field: False,
                UPDATED_BY: actor_id,
                UPDATED_AT: utc_now(),
            },
        )
        if updated is None:
            raise EntityNotFound(collection, raw_id, spec.label)

        logger.info(
            "Entity deactivated",
            collection=spec.name,
            sequence_id=updated.get(spec.sequence_field),
        )
        return updated
