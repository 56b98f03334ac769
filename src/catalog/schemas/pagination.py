"""Pagination and response envelope schemas for offset-based list endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PaginationMeta(BaseModel):
    """Response-facing pagination metadata.

    Serialized with camelCase keys (currentPage, totalPages, ...). A page past
    the end still carries valid metadata alongside an empty item list.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    current_page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total_items: int = Field(ge=0)
    total_pages: int = Field(ge=1)
    has_next_page: bool
    has_prev_page: bool


class EntityResponse(BaseModel):
    success: bool = True
    message: str
    data: dict[str, Any] | None = None


class PaginatedResponse(BaseModel):
    """List envelope: one page of documents plus its pagination metadata."""

    success: bool = True
    message: str
    data: list[dict[str, Any] | None]
    pagination: PaginationMeta
