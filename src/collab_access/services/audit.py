"""Audit trail for owner lifecycle actions."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from collab_access.domain.admissions import Admission
from collab_access.domain.capabilities import CollaborationSession, ProjectShare

_ENTITY_TYPES = {
    "session": "collaboration_session",
    "share": "project_share",
}


@dataclass(frozen=True)
class AuditEvent:
    """One owner action on a session, share or admission."""

    actor_id: UUID
    entity_type: str
    entity_id: UUID
    event_type: str
    before: dict[str, object] | None
    after: dict[str, object] | None


class AuditRepository(Protocol):
    """Persistence interface for audit events."""

    def append(self, event: AuditEvent) -> None:
        """Store an audit event."""


@dataclass
class AuditService:
    """Records who changed which capability and how."""

    repository: AuditRepository

    def record_token_event(
        self,
        owner_id: UUID,
        event_type: str,
        after: CollaborationSession | ProjectShare,
        before: CollaborationSession | ProjectShare | None = None,
    ) -> None:
        """Persist a lifecycle event for a session or share."""
        self.repository.append(
            AuditEvent(
                actor_id=owner_id,
                entity_type=_ENTITY_TYPES[after.kind],
                entity_id=after.id,
                event_type=event_type,
                before=token_snapshot(before) if before else None,
                after=token_snapshot(after),
            )
        )

    def record_admission_event(
        self, owner_id: UUID, before: Admission, after: Admission
    ) -> None:
        """Persist an owner decision on a guest admission."""
        self.repository.append(
            AuditEvent(
                actor_id=owner_id,
                entity_type="admission",
                entity_id=after.id,
                event_type=str(after.status),
                before={"status": str(before.status)},
                after={
                    "status": str(after.status),
                    "token_kind": str(after.token_kind),
                    "token_id": str(after.token_id),
                    "decided_at": after.decided_at.isoformat()
                    if after.decided_at
                    else None,
                },
            )
        )


def token_snapshot(token: CollaborationSession | ProjectShare) -> dict[str, object]:
    """Audit view of a token; the code itself is never written to the trail."""
    return {
        "project_id": str(token.project_id),
        "expires_at": token.expires_at.isoformat() if token.expires_at else None,
        "is_revoked": token.is_revoked,
        "revoked_at": token.revoked_at.isoformat() if token.revoked_at else None,
        "permissions": token.permissions.describe(),
    }
