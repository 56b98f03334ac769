"""Write-time referential integrity checks for numeric foreign keys."""

import asyncio
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase

from src.catalog.core.exceptions import ReferenceFailure, ReferenceNotFound
from src.catalog.core.logging import get_logger
from src.catalog.models.registry import CollectionRegistry, CollectionSpec, ReferenceSpec
from src.catalog.repositories.base import Document, DocumentRepository
from src.catalog.services.identifier_resolver import parse_sequence_id

logger = get_logger(__name__)


class ExistenceGuard:
    """Confirms referenced entities exist (and are active) before a write."""

    def __init__(self, database: AsyncIOMotorDatabase, registry: CollectionRegistry):
        self.database = database
        self.registry = registry

    async def ensure_exists(
        self,
        collection: str,
        value: Any,
        *,
        required: bool = True,
        require_active: bool = True,
    ) -> bool:
        """Return whether value is an acceptable reference into collection.

        An absent value is acceptable only for optional references. A present
        value must be an integer sequence id of an existing entity, which must
        also be active when require_active is set.
        """
        if value is None:
            return not required

        sequence_id = parse_sequence_id(value)
        if sequence_id is None:
            return False

        spec = self.registry.require(collection)
        repo = DocumentRepository(self.database, spec)
        document = await repo.get_by_sequence_id(sequence_id, (spec.active_field,))
        if document is None:
            return False
        if require_active and document.get(spec.active_field) is not True:
            return False
        return True

    async def _check(self, ref: ReferenceSpec, value: Any) -> bool:
        return await self.ensure_exists(
            ref.target,
            value,
            required=ref.required,
            require_active=ref.require_active,
        )

    async def check_references(
        self,
        spec: CollectionSpec,
        payload: Document,
        *,
        partial: bool = False,
    ) -> Document:
        """Guard every declared reference of a write payload.

        All checks run concurrently and every failure is reported, in declared
        order. With partial=True (updates) only references present in the
        payload are checked.

        Returns:
            The present, non-null reference values coerced to int.

        Raises:
            ReferenceNotFound: if any relationship is missing or inactive.
        """
        checks: list[tuple[ReferenceSpec, Any]] = []
        for ref in spec.references:
            if partial and ref.field not in payload:
                continue
            checks.append((ref, payload.get(ref.field)))

        results = await asyncio.gather(*(self._check(ref, value) for ref, value in checks))

        failures = [
            ReferenceFailure(ref.field, ref.target, value, ref.display_name)
            for (ref, value), ok in zip(checks, results, strict=True)
            if not ok
        ]
        if failures:
            logger.info(
                "Reference check failed",
                collection=spec.name,
                fields=[f.field for f in failures],
            )
            raise ReferenceNotFound(failures)

        return {
            ref.field: parse_sequence_id(value)
            for ref, value in checks
            if value is not None
        }
