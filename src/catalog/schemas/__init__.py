from src.catalog.schemas.documents import encode_document
from src.catalog.schemas.pagination import EntityResponse, PaginatedResponse, PaginationMeta

__all__ = [
    # Documents
    "encode_document",
    # Envelopes
    "EntityResponse",
    "PaginatedResponse",
    "PaginationMeta",
]
