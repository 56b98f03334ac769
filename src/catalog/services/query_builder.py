"""Translate untrusted list query parameters into a store query.

Every collection gets the same coercion rules: case-insensitive substring
search over its searchable fields, boolean normalization of the status flag,
integer foreign-key filters that silently drop unparsable values, an
allow-listed sort and a clamped page window.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from src.catalog.models.registry import CollectionSpec
from src.catalog.repositories.base import Document, SortSpec
from src.catalog.schemas.pagination import PaginationMeta
from src.catalog.services.identifier_resolver import INT64_MAX, parse_integer, parse_sequence_id

TRUE_VALUES = frozenset({"true", "1"})
FALSE_VALUES = frozenset({"false", "0"})
BOOLEAN_PARAMS = ("status", "active")

ASCENDING = 1
DESCENDING = -1


def coerce_bool(value: Any) -> bool | None:
    """Normalize True/False, "true"/"false" and "1"/"0". Anything else is None."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
    return None


def contains_pattern(term: str) -> Document:
    """Case-insensitive literal substring predicate."""
    return {"$regex": re.escape(term), "$options": "i"}


@dataclass(frozen=True)
class QueryPlan:
    filter: Document
    sort: SortSpec
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class QueryBuilder:
    def __init__(self, default_limit: int = 10, max_limit: int = 100):
        self.default_limit = default_limit
        self.max_limit = max_limit

    def window(self, params: Mapping[str, Any]) -> tuple[int, int]:
        """Return (page, limit): page >= 1, 1 <= limit <= max_limit.

        Oversized pages are capped so the skip still fits a BSON integer; they
        stay past the end and yield an empty page.
        """
        page = parse_integer(params.get("page"))
        limit = parse_integer(params.get("limit"))
        limit = self.default_limit if limit is None else min(max(1, limit), self.max_limit)
        page = max(1, page if page is not None else 1)
        return min(page, INT64_MAX // limit + 1), limit

    def sort(self, params: Mapping[str, Any], spec: CollectionSpec) -> SortSpec:
        sort_by = params.get("sortBy")
        if sort_by not in spec.sort_allow_list:
            sort_by = spec.default_sort

        sort_order = str(params.get("sortOrder") or "desc").strip().lower()
        direction = ASCENDING if sort_order == "asc" else DESCENDING

        sort: SortSpec = [(sort_by, direction)]
        if sort_by != spec.sequence_field:
            sort.append((spec.sequence_field, direction))
        return sort

    def filter(self, params: Mapping[str, Any], spec: CollectionSpec) -> Document:
        predicate: Document = {}

        search = params.get("search")
        if isinstance(search, str) and search.strip() and spec.searchable_fields:
            term = search.strip()
            predicate["$or"] = [{name: contains_pattern(term)} for name in spec.searchable_fields]

        for name in (*BOOLEAN_PARAMS, spec.active_field):
            if name in params:
                flag = coerce_bool(params[name])
                if flag is not None:
                    predicate[spec.active_field] = flag
                break

        for ref in spec.hydration_specs:
            if ref.field in params:
                value = parse_sequence_id(params[ref.field])
                if value is not None:
                    predicate[ref.field] = value

        for name in spec.text_filters:
            value = params.get(name)
            if isinstance(value, str) and value.strip():
                predicate[name] = contains_pattern(value.strip())

        return predicate

    def build(
        self,
        params: Mapping[str, Any],
        spec: CollectionSpec,
        base_filter: Document | None = None,
    ) -> QueryPlan:
        """Build filter, sort and window. base_filter entries take precedence."""
        page, limit = self.window(params)
        return QueryPlan(
            filter={**self.filter(params, spec), **(base_filter or {})},
            sort=self.sort(params, spec),
            page=page,
            limit=limit,
        )

    @staticmethod
    def meta(page: int, limit: int, total: int) -> PaginationMeta:
        total_pages = max(1, -(-total // limit))
        return PaginationMeta(
            current_page=page,
            limit=limit,
            total_items=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )
