"""Project resources exposed to guests and the queries they may run."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class ResourceSpec:
    """Describes one guest-visible resource kind.

    ``columns`` is the safe field subset returned to guests. Resources with a
    ``parent_table`` are scoped through that table's ``project_id`` via
    ``parent_key``; the rest carry ``project_id`` themselves.
    """

    kind: str
    table: str
    columns: tuple[str, ...]
    filterable: frozenset[str]
    writable: frozenset[str]
    required_on_add: tuple[str, ...] = ()
    order_by: str = "updated_at"
    descending: bool = True
    parent_table: str | None = None
    parent_key: str | None = None

    @property
    def select_clause(self) -> str:
        return ", ".join(self.columns)


RESOURCES: dict[str, ResourceSpec] = {
    "characters": ResourceSpec(
        kind="characters",
        table="characters",
        columns=(
            "id",
            "project_id",
            "name",
            "description",
            "archetype",
            "image_url",
        ),
        filterable=frozenset({"name", "archetype"}),
        writable=frozenset({"name", "description", "archetype"}),
        required_on_add=("name",),
    ),
    "locations": ResourceSpec(
        kind="locations",
        table="locations",
        columns=(
            "id",
            "project_id",
            "name",
            "description",
            "type",
            "address",
            "image_url",
            "shooting_notes",
        ),
        filterable=frozenset({"name", "type"}),
        writable=frozenset(
            {"name", "description", "type", "address", "shooting_notes"}
        ),
        required_on_add=("name",),
    ),
    "scenes": ResourceSpec(
        kind="scenes",
        table="scenes",
        columns=(
            "id",
            "name",
            "description",
            "screenplay_content",
            "metadata",
            "order_index",
            "created_at",
            "updated_at",
        ),
        filterable=frozenset({"name"}),
        writable=frozenset({"name", "description", "screenplay_content", "metadata"}),
        required_on_add=("name",),
        order_by="order_index",
        descending=False,
        parent_table="timelines",
        parent_key="timeline_id",
    ),
}


@dataclass(frozen=True)
class ResourceQuery:
    """Guest-supplied equality filters and paging for a scoped read."""

    filters: Mapping[str, object] = field(default_factory=dict)
    limit: int | None = None


@dataclass(frozen=True)
class WriteOperation:
    """A guest write against one resource kind."""

    action: str
    resource_kind: str
    record_id: UUID | None = None
    values: Mapping[str, object] = field(default_factory=dict)
