"""Repository layer - data access abstraction."""

from src.catalog.repositories.base import Document, DocumentRepository, build_projection
from src.catalog.repositories.sequence import (
    MongoSequenceGenerator,
    RedisSequenceGenerator,
    SequenceGenerator,
)

__all__ = [
    "Document",
    "DocumentRepository",
    "build_projection",
    "MongoSequenceGenerator",
    "RedisSequenceGenerator",
    "SequenceGenerator",
]
