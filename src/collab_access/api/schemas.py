"""Request models and response views for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from collab_access.domain.admissions import Admission
from collab_access.domain.capabilities import CollaborationSession, ProjectShare
from collab_access.services.sessions import SessionParams
from collab_access.services.shares import ShareParams


class SessionCreateRequest(BaseModel):
    """Owner request to open a collaboration session."""

    project_id: UUID
    title: str | None = None
    description: str | None = None
    expires_at: datetime | None = None
    max_participants: int | None = None
    allow_guests: bool | None = None
    allow_edit: bool | None = None
    allow_delete: bool | None = None
    allow_add_scenes: bool | None = None
    allow_edit_scenes: bool | None = None

    def to_params(self) -> SessionParams:
        return SessionParams(**self.model_dump(exclude={"project_id"}))


class SessionDetailsRequest(BaseModel):
    title: str | None = None
    description: str | None = None


class SessionRenewRequest(BaseModel):
    expires_at: datetime | None = None


class ShareCreateRequest(BaseModel):
    """Owner request to share a project."""

    project_id: UUID
    deadline: datetime | None = None
    requires_approval: bool = False
    permissions: list[str] | None = None

    def to_params(self) -> ShareParams:
        return ShareParams(
            deadline=self.deadline,
            requires_approval=self.requires_approval,
            permissions=self.permissions,
        )


class ShareRenewRequest(BaseModel):
    deadline: datetime | None = None


class AccessCodeRequest(BaseModel):
    access_code: str


class GuestWriteRequest(BaseModel):
    """Guest add or edit; the code travels with the payload."""

    access_code: str
    admission_id: UUID | None = None
    values: dict[str, object] = Field(default_factory=dict)


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def session_view(session: CollaborationSession) -> dict[str, object]:
    """Owner view of a session."""
    return {
        "id": str(session.id),
        "project_id": str(session.project_id),
        "user_id": str(session.owner_id),
        "access_code": session.access_code,
        "title": session.title,
        "description": session.description,
        "expires_at": _timestamp(session.expires_at),
        "max_participants": session.max_participants,
        **session.permissions.describe(),
        "is_revoked": session.is_revoked,
        "revoked_at": _timestamp(session.revoked_at),
        "created_at": _timestamp(session.created_at),
    }


def guest_session_view(session: CollaborationSession) -> dict[str, object]:
    """What a guest learns about the session their code opened."""
    return {
        "id": str(session.id),
        "project_id": str(session.project_id),
        "title": session.title,
        "description": session.description,
        "expires_at": _timestamp(session.expires_at),
        **session.permissions.describe(),
    }


def share_view(share: ProjectShare) -> dict[str, object]:
    """Owner view of a share."""
    return {
        "id": str(share.id),
        "project_id": str(share.project_id),
        "owner_id": str(share.owner_id),
        "share_key": share.share_key,
        "deadline": _timestamp(share.deadline),
        "requires_approval": share.requires_approval,
        "permissions": share.permissions.describe(),
        "is_revoked": share.is_revoked,
        "revoked_at": _timestamp(share.revoked_at),
        "created_at": _timestamp(share.created_at),
    }


def admission_view(admission: Admission) -> dict[str, object]:
    return {
        "id": str(admission.id),
        "token_kind": str(admission.token_kind),
        "token_id": str(admission.token_id),
        "status": str(admission.status),
        "created_at": _timestamp(admission.created_at),
        "decided_at": _timestamp(admission.decided_at),
    }
