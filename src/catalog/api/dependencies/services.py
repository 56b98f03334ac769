"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends, Header

from src.catalog.api.dependencies.db import DB, Sequences
from src.catalog.core.config import get_settings
from src.catalog.core.logging import bind_actor_context
from src.catalog.models import get_registry
from src.catalog.services.entity_service import EntityService
from src.catalog.services.identifier_resolver import INT64_MAX, INT64_MIN
from src.catalog.services.query_builder import QueryBuilder


def get_entity_service(database: DB, sequences: Sequences) -> EntityService:
    """Get entity service bound to the process-wide registry."""
    settings = get_settings()
    return EntityService(
        database,
        get_registry(),
        sequences,
        QueryBuilder(settings.default_page_size, settings.max_page_size),
    )


def get_actor_id(
    x_user_id: Annotated[
        int | None,
        Header(description="Acting user's sequence id", ge=INT64_MIN, le=INT64_MAX),
    ] = None,
) -> int | None:
    """Acting user id, set by the upstream authentication layer."""
    bind_actor_context(x_user_id)
    return x_user_id


EntityServiceDep = Annotated[EntityService, Depends(get_entity_service)]
ActorId = Annotated[int | None, Depends(get_actor_id)]
