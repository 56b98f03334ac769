"""Tests for list query construction and pagination metadata."""

import pytest

from src.catalog.models import get_registry
from src.catalog.services.query_builder import QueryBuilder, coerce_bool

pytestmark = pytest.mark.unit


@pytest.fixture
def builder() -> QueryBuilder:
    return QueryBuilder(default_limit=10, max_limit=100)


@pytest.fixture
def items_spec():  # type: ignore[no-untyped-def]
    return get_registry()["grocery_items"]


@pytest.fixture
def types_spec():  # type: ignore[no-untyped-def]
    return get_registry()["grocery_categories_type"]


class TestCoerceBool:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (True, True),
            (False, False),
            ("true", True),
            ("false", False),
            ("1", True),
            ("0", False),
            (" TRUE ", True),
            ("yes", None),
            ("", None),
            (None, None),
        ],
    )
    def test_coerce_bool(self, raw, expected) -> None:  # type: ignore[no-untyped-def]
        assert coerce_bool(raw) is expected


class TestWindow:
    def test_defaults(self, builder) -> None:  # type: ignore[no-untyped-def]
        assert builder.window({}) == (1, 10)

    def test_page_floored_at_one(self, builder) -> None:  # type: ignore[no-untyped-def]
        assert builder.window({"page": "0"})[0] == 1
        assert builder.window({"page": "-4"})[0] == 1

    def test_limit_clamped(self, builder) -> None:  # type: ignore[no-untyped-def]
        assert builder.window({"limit": "0"})[1] == 1
        assert builder.window({"limit": "500"})[1] == 100
        assert builder.window({"limit": "25"})[1] == 25

    def test_unparsable_values_fall_back_to_defaults(self, builder) -> None:  # type: ignore[no-untyped-def]
        assert builder.window({"page": "two", "limit": "lots"}) == (1, 10)

    def test_skip(self, builder, types_spec) -> None:  # type: ignore[no-untyped-def]
        plan = builder.build({"page": "3", "limit": "20"}, types_spec)
        assert plan.skip == 40

    @pytest.mark.parametrize("limit", ["1", "10", "100"])
    def test_huge_page_keeps_skip_in_int64(self, builder, types_spec, limit) -> None:  # type: ignore[no-untyped-def]
        plan = builder.build({"page": "99999999999999999999", "limit": limit}, types_spec)
        assert plan.page > 1
        assert plan.limit == int(limit)
        assert 0 < plan.skip <= 2**63 - 1

    def test_non_ascii_digits_fall_back_to_defaults(self, builder) -> None:  # type: ignore[no-untyped-def]
        assert builder.window({"page": "\u0663", "limit": "\u0665"}) == (1, 10)


class TestSort:
    def test_default_is_created_at_desc(self, builder, types_spec) -> None:  # type: ignore[no-untyped-def]
        sort = builder.sort({}, types_spec)
        assert sort[0] == ("created_at", -1)

    def test_tiebreak_on_sequence_field(self, builder, types_spec) -> None:  # type: ignore[no-untyped-def]
        sort = builder.sort({"sortBy": "Name", "sortOrder": "asc"}, types_spec)
        assert sort == [("Name", 1), ("Grocery_Categories_type_id", 1)]

    def test_field_outside_allow_list_is_ignored(self, builder, types_spec) -> None:  # type: ignore[no-untyped-def]
        sort = builder.sort({"sortBy": "$where"}, types_spec)
        assert sort[0] == ("created_at", -1)

    def test_unknown_order_means_desc(self, builder, types_spec) -> None:  # type: ignore[no-untyped-def]
        sort = builder.sort({"sortBy": "Name", "sortOrder": "sideways"}, types_spec)
        assert sort[0] == ("Name", -1)


class TestFilter:
    def test_search_builds_case_insensitive_or(self, builder, items_spec) -> None:  # type: ignore[no-untyped-def]
        predicate = builder.filter({"search": "  apple "}, items_spec)
        assert predicate["$or"][0] == {"name": {"$regex": "apple", "$options": "i"}}
        assert len(predicate["$or"]) == len(items_spec.searchable_fields)

    def test_search_term_is_literal(self, builder, types_spec) -> None:  # type: ignore[no-untyped-def]
        predicate = builder.filter({"search": "a.b*"}, types_spec)
        assert predicate["$or"] == [{"Name": {"$regex": r"a\.b\*", "$options": "i"}}]

    def test_blank_search_is_no_search(self, builder, types_spec) -> None:  # type: ignore[no-untyped-def]
        assert builder.filter({"search": "   "}, types_spec) == {}

    def test_status_string_and_bool_give_same_predicate(self, builder, types_spec) -> None:  # type: ignore[no-untyped-def]
        from_string = builder.filter({"status": "false"}, types_spec)
        from_bool = builder.filter({"status": False}, types_spec)
        assert from_string == from_bool == {"Status": False}

    def test_active_alias_uses_collection_flag(self, builder) -> None:  # type: ignore[no-untyped-def]
        services = get_registry()["services"]
        assert builder.filter({"active": "1"}, services) == {"status": True}

    def test_unrecognized_status_is_dropped(self, builder, types_spec) -> None:  # type: ignore[no-untyped-def]
        assert builder.filter({"status": "maybe"}, types_spec) == {}

    def test_reference_filters_parse_integers(self, builder, items_spec) -> None:  # type: ignore[no-untyped-def]
        predicate = builder.filter(
            {"Grocery_Categories_id": "7", "business_Branch_id": "abc"}, items_spec
        )
        assert predicate == {"Grocery_Categories_id": 7}

    def test_text_filter(self, builder, items_spec) -> None:  # type: ignore[no-untyped-def]
        predicate = builder.filter({"unit": "kg"}, items_spec)
        assert predicate["unit"] == {"$regex": "kg", "$options": "i"}

    def test_out_of_range_reference_filter_is_dropped(self, builder, items_spec) -> None:  # type: ignore[no-untyped-def]
        predicate = builder.filter(
            {"Grocery_Categories_id": "99999999999999999999", "service_id": "\u0661"}, items_spec
        )
        assert predicate == {}

    def test_base_filter_takes_precedence(self, builder, types_spec) -> None:  # type: ignore[no-untyped-def]
        plan = builder.build(
            {"Grocery_Categories_id": "9"}, types_spec, base_filter={"Grocery_Categories_id": 2}
        )
        assert plan.filter["Grocery_Categories_id"] == 2


class TestMeta:
    def test_empty_result_has_one_page(self) -> None:
        meta = QueryBuilder.meta(page=1, limit=10, total=0)
        assert meta.total_pages == 1
        assert meta.has_next_page is False
        assert meta.has_prev_page is False

    def test_last_page(self) -> None:
        meta = QueryBuilder.meta(page=3, limit=10, total=25)
        assert meta.total_pages == 3
        assert meta.has_next_page is False
        assert meta.has_prev_page is True

    def test_middle_page(self) -> None:
        meta = QueryBuilder.meta(page=2, limit=10, total=25)
        assert meta.has_next_page is True
        assert meta.has_prev_page is True

    def test_page_past_the_end_is_valid(self) -> None:
        meta = QueryBuilder.meta(page=9, limit=10, total=25)
        assert meta.total_pages == 3
        assert meta.has_next_page is False
        assert meta.total_items == 25

    def test_serializes_camel_case(self) -> None:
        dumped = QueryBuilder.meta(page=1, limit=10, total=5).model_dump(by_alias=True)
        assert dumped == {
            "currentPage": 1,
            "limit": 10,
            "totalItems": 5,
            "totalPages": 1,
            "hasNextPage": False,
            "hasPrevPage": False,
        }
