"""The catalog's collections and their relationships."""

from functools import lru_cache

from src.catalog.models.registry import (
    USER_COLLECTION,
    CollectionRegistry,
    CollectionSpec,
    ReferenceSpec,
)

BRANCH_PROJECTION = (
    "business_Branch_id",
    "firstName",
    "lastName",
    "BusinessName",
    "Address",
    "City",
    "state",
    "country",
)
CATEGORY_PROJECTION = ("Grocery_Categories_id", "Name", "Coverimage", "Status")
CATEGORY_TYPE_PROJECTION = ("Grocery_Categories_type_id", "Name", "Coverimage", "Status")


COLLECTIONS: tuple[CollectionSpec, ...] = (
    CollectionSpec(
        name=USER_COLLECTION,
        sequence_field="user_id",
        label="User",
        searchable_fields=("firstName", "lastName", "Email", "phoneNo", "BusinessName"),
        sortable_fields=("firstName", "lastName"),
    ),
    CollectionSpec(
        name="business_branch",
        sequence_field="business_Branch_id",
        label="Business Branch",
        searchable_fields=("firstName", "lastName", "Email", "GoogleLocaitonAddress"),
        sortable_fields=("firstName", "lastName", "BusinessName"),
    ),
    CollectionSpec(
        name="services",
        sequence_field="service_id",
        label="Service",
        active_field="status",
        searchable_fields=("name", "description"),
        sortable_fields=("name",),
    ),
    CollectionSpec(
        name="grocery_categories",
        sequence_field="Grocery_Categories_id",
        label="Grocery Categories",
        searchable_fields=("Name",),
        sortable_fields=("Name",),
    ),
    CollectionSpec(
        name="grocery_categories_type",
        sequence_field="Grocery_Categories_type_id",
        label="Grocery Categories Type",
        searchable_fields=("Name",),
        sortable_fields=("Name",),
        references=(
            ReferenceSpec(
                "Grocery_Categories_id",
                "grocery_categories",
                CATEGORY_PROJECTION,
                required=True,
                label="Grocery Categories",
            ),
        ),
    ),
    CollectionSpec(
        name="grocery_items",
        sequence_field="Grocery_Items_id",
        label="Grocery Item",
        searchable_fields=("name", "Description", "SupplierName", "unit", "DeliveryTime"),
        sortable_fields=("name", "unitPrice", "CurrentStock"),
        text_filters=("unit",),
        references=(
            ReferenceSpec(
                "business_Branch_id",
                "business_branch",
                BRANCH_PROJECTION,
                required=True,
                label="Business Branch",
            ),
            ReferenceSpec(
                "Grocery_Categories_id",
                "grocery_categories",
                CATEGORY_PROJECTION,
                required=True,
                label="Grocery Categories",
            ),
            ReferenceSpec(
                "Grocery_Categories_type_id",
                "grocery_categories_type",
                CATEGORY_TYPE_PROJECTION,
                label="Grocery Categories Type",
            ),
            ReferenceSpec(
                "service_id",
                "services",
                ("service_id", "name", "description"),
                label="Service",
            ),
        ),
    ),
    CollectionSpec(
        name="catering_type",
        sequence_field="Catering_Type_id",
        label="Catering Type",
        searchable_fields=("name",),
        sortable_fields=("name",),
    ),
    CollectionSpec(
        name="catering",
        sequence_field="Catering_id",
        label="Catering",
        searchable_fields=("Title", "Description", "Location"),
        sortable_fields=("Title", "Price"),
        references=(
            ReferenceSpec(
                "Catering_type_id",
                "catering_type",
                None,
                required=True,
                label="Catering Type",
            ),
            ReferenceSpec(
                "Branch_id",
                "business_branch",
                ("business_Branch_id", "firstName", "lastName", "Address"),
                required=True,
                label="Business Branch",
            ),
        ),
    ),
    CollectionSpec(
        name="restaurant_item_category",
        sequence_field="Restaurant_item_Category_id",
        label="Restaurant Item Category",
        searchable_fields=("CategoryName",),
        sortable_fields=("CategoryName",),
    ),
    CollectionSpec(
        name="supplier",
        sequence_field="Supplier_id",
        label="Supplier",
        searchable_fields=("Name", "Email", "Mobile"),
        sortable_fields=("Name",),
    ),
    CollectionSpec(
        name="supplier_items",
        sequence_field="Supplier_Items_id",
        label="Supplier Item",
        searchable_fields=("ItemName", "unit"),
        sortable_fields=("ItemName", "unitPrice"),
        text_filters=("unit",),
        references=(
            ReferenceSpec(
                "business_Branch_id",
                "business_branch",
                BRANCH_PROJECTION,
                required=True,
                label="Business Branch",
            ),
            ReferenceSpec(
                "Restaurant_item_Category_id",
                "restaurant_item_category",
                ("Restaurant_item_Category_id", "CategoryName", "Status"),
                required=True,
                label="Restaurant Item Category",
            ),
            ReferenceSpec(
                "Supplier_id",
                "supplier",
                ("Supplier_id", "Name", "Email", "Mobile"),
                label="Supplier",
            ),
        ),
    ),
)


@lru_cache
def get_registry() -> CollectionRegistry:
    """Build the registry once per process."""
    return CollectionRegistry(COLLECTIONS)
