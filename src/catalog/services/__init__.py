from src.catalog.services.entity_service import EntityService
from src.catalog.services.existence_guard import ExistenceGuard
from src.catalog.services.hydrator import ReferenceHydrator
from src.catalog.services.identifier_resolver import IdentifierResolver
from src.catalog.services.query_builder import QueryBuilder, QueryPlan

__all__ = [
    "EntityService",
    "ExistenceGuard",
    "IdentifierResolver",
    "QueryBuilder",
    "QueryPlan",
    "ReferenceHydrator",
]
