from src.catalog.models.collections import COLLECTIONS, get_registry
from src.catalog.models.registry import (
    AUDIT_REFERENCES,
    USER_COLLECTION,
    CollectionRegistry,
    CollectionSpec,
    ReferenceSpec,
)

__all__ = [
    "AUDIT_REFERENCES",
    "COLLECTIONS",
    "USER_COLLECTION",
    "CollectionRegistry",
    "CollectionSpec",
    "ReferenceSpec",
    "get_registry",
]
