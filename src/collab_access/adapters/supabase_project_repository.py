"""Supabase access to the project data guests work on."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from collab_access.domain.capabilities import ProjectScope
from collab_access.domain.resources import ResourceQuery, ResourceSpec
from collab_access.services.projects import ProjectDataStore, ProjectDirectory

DEFAULT_TIMELINE_NAME = "Main Timeline"


@dataclass
class SupabaseProjectRepository(ProjectDirectory, ProjectDataStore):
    """Project-scoped reads and writes.

    Every query filters on the scope's project, either directly through
    ``project_id`` or through the parent rows that carry it.
    """

    client: Client

    def get_owner_id(self, project_id: UUID) -> UUID | None:
        response = (
            self.client.table("projects")
            .select("user_id")
            .eq("id", str(project_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return UUID(str(response.data[0]["user_id"]))

    def get_summary(self, scope: ProjectScope) -> dict[str, object] | None:
        response = (
            self.client.table("projects")
            .select("id, name, thumbnail")
            .eq("id", str(scope.project_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0]

    def select(
        self, scope: ProjectScope, spec: ResourceSpec, query: ResourceQuery
    ) -> list[dict[str, object]]:
        builder = self._scoped(
            self.client.table(spec.table).select(spec.select_clause), scope, spec
        )
        if builder is None:
            return []
        for column, value in query.filters.items():
            builder = builder.eq(column, value)
        builder = builder.order(spec.order_by, desc=spec.descending)
        if query.limit is not None:
            builder = builder.limit(query.limit)
        response = builder.execute()
        return list(response.data or [])

    def get(
        self, scope: ProjectScope, spec: ResourceSpec, record_id: UUID
    ) -> dict[str, object] | None:
        builder = self._scoped(
            self.client.table(spec.table).select(spec.select_clause), scope, spec
        )
        if builder is None:
            return None
        response = builder.eq("id", str(record_id)).limit(1).execute()
        if not response.data:
            return None
        return response.data[0]

    def insert(
        self, scope: ProjectScope, spec: ResourceSpec, values: Mapping[str, object]
    ) -> dict[str, object]:
        """Create a row owned by the project owner."""
        owner_id = self.get_owner_id(scope.project_id)
        if owner_id is None:
            raise RuntimeError(f"Project {scope.project_id} has no owner")
        payload: dict[str, object] = {**values, "user_id": str(owner_id)}
        if spec.parent_table is None:
            payload["project_id"] = str(scope.project_id)
        else:
            payload.update(self._new_child_fields(scope, spec, owner_id))
        response = self.client.table(spec.table).insert(payload).execute()
        if not response.data:
            raise RuntimeError(f"Failed to insert into {spec.table}")
        return _public(spec, response.data[0])

    def update(
        self,
        scope: ProjectScope,
        spec: ResourceSpec,
        record_id: UUID,
        values: Mapping[str, object],
    ) -> dict[str, object] | None:
        payload = {**values, "updated_at": datetime.now(UTC).isoformat()}
        builder = self._scoped(
            self.client.table(spec.table).update(payload), scope, spec
        )
        if builder is None:
            return None
        response = builder.eq("id", str(record_id)).execute()
        if not response.data:
            return None
        return _public(spec, response.data[0])

    def delete(self, scope: ProjectScope, spec: ResourceSpec, record_id: UUID) -> bool:
        builder = self._scoped(self.client.table(spec.table).delete(), scope, spec)
        if builder is None:
            return False
        response = builder.eq("id", str(record_id)).execute()
        return bool(response.data)

    def _scoped(self, builder, scope: ProjectScope, spec: ResourceSpec):
        """Restrict a query to the project; None when it cannot match anything."""
        if spec.parent_table is None:
            return builder.eq("project_id", str(scope.project_id))
        parent_ids = self._parent_ids(scope, spec)
        if not parent_ids:
            return None
        return builder.in_(spec.parent_key, parent_ids)

    def _parent_ids(self, scope: ProjectScope, spec: ResourceSpec) -> list[str]:
        response = (
            self.client.table(spec.parent_table)
            .select("id")
            .eq("project_id", str(scope.project_id))
            .execute()
        )
        return [str(row["id"]) for row in response.data or []]

    def _new_child_fields(
        self, scope: ProjectScope, spec: ResourceSpec, owner_id: UUID
    ) -> dict[str, object]:
        """Parent link and ordering for a new timeline-scoped row."""
        parent_ids = self._parent_ids(scope, spec)
        if parent_ids:
            parent_id = parent_ids[0]
        else:
            parent_id = self._create_timeline(scope, owner_id)
        last = (
            self.client.table(spec.table)
            .select("order_index")
            .eq(spec.parent_key, parent_id)
            .order("order_index", desc=True)
            .limit(1)
            .execute()
        )
        rows = last.data or []
        next_index = int(rows[0].get("order_index") or 0) + 1 if rows else 1
        return {
            spec.parent_key: parent_id,
            "order_index": next_index,
            "start_time_seconds": 0,
            "duration_seconds": 0,
            "scene_type": "text",
        }

    def _create_timeline(self, scope: ProjectScope, owner_id: UUID) -> str:
        response = (
            self.client.table("timelines")
            .insert(
                {
                    "project_id": str(scope.project_id),
                    "user_id": str(owner_id),
                    "name": DEFAULT_TIMELINE_NAME,
                    "description": "Default timeline for collaboration",
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create timeline")
        return str(response.data[0]["id"])


def _public(spec: ResourceSpec, row: Mapping[str, object]) -> dict[str, object]:
    return {column: row[column] for column in spec.columns if column in row}
