"""Collaboration session lifecycle."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID, uuid4

from collab_access.domain.capabilities import (
    CollaborationSession,
    SessionPermissions,
    Validation,
)
from collab_access.domain.errors import AccessError, ErrorKind
from collab_access.services.capabilities import (
    CapabilityAuthority,
    CapabilityRepository,
    as_utc,
)


class SessionRepository(CapabilityRepository[CollaborationSession], Protocol):
    """Persistence interface for collaboration sessions."""

    def update_details(
        self, session_id: UUID, title: str | None, description: str | None
    ) -> CollaborationSession | None:
        """Update display metadata of a session that is not revoked."""


@dataclass(frozen=True)
class SessionParams:
    """Owner-supplied settings for a new session.

    Flags left as None are permissive.
    """

    title: str | None = None
    description: str | None = None
    expires_at: datetime | None = None
    max_participants: int | None = None
    allow_guests: bool | None = None
    allow_edit: bool | None = None
    allow_delete: bool | None = None
    allow_add_scenes: bool | None = None
    allow_edit_scenes: bool | None = None

    def permissions(self) -> SessionPermissions:
        return SessionPermissions(
            allow_guests=_flag(self.allow_guests),
            allow_edit=_flag(self.allow_edit),
            allow_delete=_flag(self.allow_delete),
            allow_add_scenes=_flag(self.allow_add_scenes),
            allow_edit_scenes=_flag(self.allow_edit_scenes),
        )


@dataclass
class SessionAuthority(CapabilityAuthority[CollaborationSession]):
    """Owns creation, renewal, revocation and validation of sessions."""

    repository: SessionRepository

    def create_session(
        self, owner_id: UUID, project_id: UUID, params: SessionParams | None = None
    ) -> CollaborationSession:
        """Create a session with a fresh access code."""
        params = params or SessionParams()
        if params.max_participants is not None and params.max_participants < 1:
            raise AccessError(
                ErrorKind.VALIDATION_INPUT, "max_participants must be positive"
            )
        permissions = params.permissions()
        expires_at = as_utc(params.expires_at)
        created_at = self.clock()

        def build(code: str) -> CollaborationSession:
            return CollaborationSession(
                id=uuid4(),
                project_id=project_id,
                owner_id=owner_id,
                code=code,
                expires_at=expires_at,
                is_revoked=False,
                revoked_at=None,
                created_at=created_at,
                permissions=permissions,
                title=params.title,
                description=params.description,
                max_participants=params.max_participants,
            )

        return self.issue(owner_id, project_id, build)

    def get_session(self, owner_id: UUID, session_id: UUID) -> CollaborationSession:
        return self.get_owned(owner_id, session_id)

    def list_sessions(
        self, owner_id: UUID, project_id: UUID, include_revoked: bool = False
    ) -> list[CollaborationSession]:
        """Return the owner's sessions for a project, newest first."""
        return self.list_owned(owner_id, project_id, include_revoked)

    def renew_session(
        self, owner_id: UUID, session_id: UUID, new_expires_at: datetime | None
    ) -> CollaborationSession:
        return self.renew(owner_id, session_id, new_expires_at)

    def revoke_session(self, owner_id: UUID, session_id: UUID) -> CollaborationSession:
        return self.revoke(owner_id, session_id)

    def update_session_details(
        self,
        owner_id: UUID,
        session_id: UUID,
        title: str | None,
        description: str | None,
    ) -> CollaborationSession:
        """Change title and description of a live or expired session."""
        current = self.get_owned(owner_id, session_id)
        if current.is_revoked:
            raise AccessError(ErrorKind.TERMINAL)
        updated = self.repository.update_details(session_id, title, description)
        if updated is None:
            raise AccessError(ErrorKind.TERMINAL)
        self.audit_service.record_token_event(
            owner_id, "details_updated", updated, before=current
        )
        return updated

    def validate_access_code(self, code: str) -> Validation[CollaborationSession]:
        """Check token liveness only; participant caps are enforced on join."""
        return self.validate(code)


def _flag(value: bool | None) -> bool:
    return True if value is None else value
