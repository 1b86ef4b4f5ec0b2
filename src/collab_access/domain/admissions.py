"""Domain models for guest admissions."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from collab_access.domain.capabilities import TokenKind


class AdmissionStatus(StrEnum):
    """Admission states. Only ``pending`` may transition."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Admission:
    """A guest entering a session or share."""

    id: UUID
    token_kind: TokenKind
    token_id: UUID
    status: AdmissionStatus
    created_at: datetime
    decided_at: datetime | None
