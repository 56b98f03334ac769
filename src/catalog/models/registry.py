"""Collection registry: the static per-collection configuration table.

Each collection declares its sequence-id field, active flag, the fields a list
query may search and sort on, and its numeric foreign keys together with the
projection used when hydrating them. The registry is built once at process
startup and is read-only afterwards.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from src.catalog.core.exceptions import RegistryError, UnknownCollection

USER_COLLECTION = "user"
USER_PROJECTION = ("user_id", "firstName", "lastName", "phoneNo", "BusinessName")

CREATED_AT = "created_at"
UPDATED_AT = "updated_at"
CREATED_BY = "created_by"
UPDATED_BY = "updated_by"


@dataclass(frozen=True)
class ReferenceSpec:
    """A numeric foreign key and how to resolve it.

    projection=None hydrates the whole referenced document.
    """

    field: str
    target: str
    projection: tuple[str, ...] | None = None
    required: bool = False
    require_active: bool = True
    label: str | None = None

    @property
    def display_name(self) -> str:
        return self.label or self.target.replace("_", " ").title()


AUDIT_REFERENCES = (
    ReferenceSpec(CREATED_BY, USER_COLLECTION, USER_PROJECTION, label="Created By"),
    ReferenceSpec(UPDATED_BY, USER_COLLECTION, USER_PROJECTION, label="Updated By"),
)


@dataclass(frozen=True)
class CollectionSpec:
    name: str
    sequence_field: str
    label: str
    active_field: str = "Status"
    searchable_fields: tuple[str, ...] = ()
    sortable_fields: tuple[str, ...] = ()
    text_filters: tuple[str, ...] = ()
    references: tuple[ReferenceSpec, ...] = ()
    default_sort: str = CREATED_AT
    _by_field: Mapping[str, ReferenceSpec] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_field: dict[str, ReferenceSpec] = {}
        for ref in (*self.references, *AUDIT_REFERENCES):
            if ref.field in by_field:
                raise RegistryError(f"{self.name}: duplicate reference field '{ref.field}'")
            by_field[ref.field] = ref
        object.__setattr__(self, "_by_field", MappingProxyType(by_field))

        if self.default_sort not in self.sort_allow_list:
            raise RegistryError(f"{self.name}: default sort '{self.default_sort}' is not sortable")

    @property
    def sort_allow_list(self) -> frozenset[str]:
        return frozenset((*self.sortable_fields, self.sequence_field, CREATED_AT, UPDATED_AT))

    @property
    def hydration_specs(self) -> tuple[ReferenceSpec, ...]:
        """Declared references plus the implicit audit references."""
        return (*self.references, *AUDIT_REFERENCES)

    @property
    def server_managed_fields(self) -> frozenset[str]:
        """Fields a caller may never write directly."""
        return frozenset(("_id", self.sequence_field, CREATED_AT, UPDATED_AT, CREATED_BY, UPDATED_BY))

    def reference(self, field_name: str) -> ReferenceSpec | None:
        return self._by_field.get(field_name)


class CollectionRegistry(Mapping[str, CollectionSpec]):
    """Immutable name -> CollectionSpec table."""

    def __init__(self, specs: Iterable[CollectionSpec]):
        table: dict[str, CollectionSpec] = {}
        for spec in specs:
            if spec.name in table:
                raise RegistryError(f"Collection '{spec.name}' registered twice")
            table[spec.name] = spec

        for spec in table.values():
            for ref in spec.hydration_specs:
                if ref.target not in table:
                    raise RegistryError(
                        f"{spec.name}.{ref.field} references unknown collection '{ref.target}'"
                    )

        self._table = MappingProxyType(table)

    def __getitem__(self, name: str) -> CollectionSpec:
        return self._table[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def require(self, name: str) -> CollectionSpec:
        """Look up a collection, raising UnknownCollection for unregistered names."""
        try:
            return self._table[name]
        except KeyError:
            raise UnknownCollection(name) from None
