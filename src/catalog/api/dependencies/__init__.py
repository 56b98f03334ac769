"""FastAPI dependency injection definitions."""

from src.catalog.api.dependencies.db import DB, Sequences, get_db, get_sequence_generator
from src.catalog.api.dependencies.services import (
    ActorId,
    EntityServiceDep,
    get_actor_id,
    get_entity_service,
)

__all__ = [
    # Store
    "DB",
    "Sequences",
    "get_db",
    "get_sequence_generator",
    # Services
    "ActorId",
    "EntityServiceDep",
    "get_actor_id",
    "get_entity_service",
]
