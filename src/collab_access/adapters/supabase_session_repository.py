"""Supabase-backed collaboration session repository."""

from dataclasses import dataclass
from uuid import UUID

from collab_access.adapters.supabase_capability_repository import (
    SupabaseCapabilityRepository,
    format_timestamp,
    parse_timestamp,
)
from collab_access.domain.capabilities import CollaborationSession, SessionPermissions
from collab_access.services.sessions import SessionRepository

_FLAGS = (
    "allow_guests",
    "allow_edit",
    "allow_delete",
    "allow_add_scenes",
    "allow_edit_scenes",
)


@dataclass
class SupabaseSessionRepository(
    SupabaseCapabilityRepository[CollaborationSession], SessionRepository
):
    """Supabase implementation for collaboration sessions."""

    table_name = "collaboration_sessions"
    code_column = "access_code"
    expiry_column = "expires_at"
    owner_column = "user_id"
    columns = (
        "id, project_id, user_id, access_code, title, description, expires_at, "
        "max_participants, allow_guests, allow_edit, allow_delete, "
        "allow_add_scenes, allow_edit_scenes, is_revoked, revoked_at, created_at"
    )

    def update_details(
        self, session_id: UUID, title: str | None, description: str | None
    ) -> CollaborationSession | None:
        """Update title and description unless the session is revoked."""
        return self._update_live(
            session_id, {"title": title, "description": description}
        )

    def _to_row(self, token: CollaborationSession) -> dict[str, object]:
        return {
            "id": str(token.id),
            "project_id": str(token.project_id),
            "user_id": str(token.owner_id),
            "access_code": token.code,
            "title": token.title,
            "description": token.description,
            "expires_at": format_timestamp(token.expires_at),
            "max_participants": token.max_participants,
            **token.permissions.describe(),
            "is_revoked": token.is_revoked,
            "revoked_at": format_timestamp(token.revoked_at),
            "created_at": format_timestamp(token.created_at),
        }

    def _from_row(self, row: dict[str, object]) -> CollaborationSession:
        created_at = parse_timestamp(row.get("created_at"))
        if created_at is None:
            raise RuntimeError("Session row is missing created_at")
        return CollaborationSession(
            id=UUID(str(row["id"])),
            project_id=UUID(str(row["project_id"])),
            owner_id=UUID(str(row["user_id"])),
            code=str(row["access_code"]),
            expires_at=parse_timestamp(row.get("expires_at")),
            is_revoked=bool(row.get("is_revoked", False)),
            revoked_at=parse_timestamp(row.get("revoked_at")),
            created_at=created_at,
            permissions=SessionPermissions(
                **{flag: row.get(flag) is not False for flag in _FLAGS}
            ),
            title=row.get("title"),
            description=row.get("description"),
            max_participants=row.get("max_participants"),
        )
