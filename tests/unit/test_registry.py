"""Tests for collection registry validation."""

import pytest

from src.catalog.core.exceptions import RegistryError, UnknownCollection
from src.catalog.models import COLLECTIONS, get_registry
from src.catalog.models.registry import CollectionRegistry, CollectionSpec, ReferenceSpec

pytestmark = pytest.mark.unit


def _user() -> CollectionSpec:
    return CollectionSpec(name="user", sequence_field="user_id", label="User")


def test_catalog_registry_is_consistent() -> None:
    registry = get_registry()
    assert len(registry) == len(COLLECTIONS)
    assert registry["grocery_categories_type"].reference("Grocery_Categories_id").required


def test_require_unknown_collection() -> None:
    with pytest.raises(UnknownCollection) as exc_info:
        get_registry().require("widgets")
    assert exc_info.value.status_code == 404


def test_unknown_reference_target_fails_at_build() -> None:
    orphan = CollectionSpec(
        name="orphan",
        sequence_field="orphan_id",
        label="Orphan",
        references=(ReferenceSpec("parent_id", "missing_parent"),),
    )
    with pytest.raises(RegistryError, match="missing_parent"):
        CollectionRegistry([_user(), orphan])


def test_audit_references_need_a_user_collection() -> None:
    lonely = CollectionSpec(name="lonely", sequence_field="lonely_id", label="Lonely")
    with pytest.raises(RegistryError, match="user"):
        CollectionRegistry([lonely])


def test_duplicate_collection_name() -> None:
    with pytest.raises(RegistryError, match="registered twice"):
        CollectionRegistry([_user(), _user()])


def test_duplicate_reference_field() -> None:
    with pytest.raises(RegistryError, match="duplicate reference"):
        CollectionSpec(
            name="bad",
            sequence_field="bad_id",
            label="Bad",
            references=(ReferenceSpec("created_by", "user"),),
        )


def test_default_sort_must_be_sortable() -> None:
    with pytest.raises(RegistryError, match="not sortable"):
        CollectionSpec(name="bad", sequence_field="bad_id", label="Bad", default_sort="Name")


def test_hydration_specs_include_audit_fields() -> None:
    spec = get_registry()["catering"]
    fields = [ref.field for ref in spec.hydration_specs]
    assert fields == ["Catering_type_id", "Branch_id", "created_by", "updated_by"]


def test_server_managed_fields() -> None:
    spec = get_registry()["supplier"]
    assert {"_id", "Supplier_id", "created_at", "created_by"} <= spec.server_managed_fields
    assert "Name" not in spec.server_managed_fields


def test_reference_display_name_falls_back_to_target() -> None:
    assert ReferenceSpec("x_id", "restaurant_item_category").display_name == (
        "Restaurant Item Category"
    )
