"""Interfaces to the external project store."""

from collections.abc import Mapping
from typing import Protocol
from uuid import UUID

from collab_access.domain.capabilities import ProjectScope
from collab_access.domain.resources import ResourceQuery, ResourceSpec


class ProjectDirectory(Protocol):
    """Ownership lookups for projects."""

    def get_owner_id(self, project_id: UUID) -> UUID | None:
        """Return the owning user id, or None when the project is unknown."""


class ProjectDataStore(Protocol):
    """Project-scoped access to guest-visible resources.

    Every method takes a ``ProjectScope`` and restricts the underlying query
    to it; there is no way to address rows outside a project.
    """

    def get_summary(self, scope: ProjectScope) -> dict[str, object] | None:
        """Return the public project summary."""

    def select(
        self, scope: ProjectScope, spec: ResourceSpec, query: ResourceQuery
    ) -> list[dict[str, object]]:
        """Return rows of a resource kind inside the project."""

    def get(
        self, scope: ProjectScope, spec: ResourceSpec, record_id: UUID
    ) -> dict[str, object] | None:
        """Return one row inside the project, if present."""

    def insert(
        self, scope: ProjectScope, spec: ResourceSpec, values: Mapping[str, object]
    ) -> dict[str, object]:
        """Create a row inside the project and return it."""

    def update(
        self,
        scope: ProjectScope,
        spec: ResourceSpec,
        record_id: UUID,
        values: Mapping[str, object],
    ) -> dict[str, object] | None:
        """Update a row inside the project; None when it is not there."""

    def delete(self, scope: ProjectScope, spec: ResourceSpec, record_id: UUID) -> bool:
        """Delete a row inside the project; False when it is not there."""
