"""Project share lifecycle and owner decisions on admissions."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID, uuid4

from collab_access.domain.admissions import Admission, AdmissionStatus
from collab_access.domain.capabilities import (
    ProjectShare,
    SharePermissions,
    TokenKind,
    Validation,
)
from collab_access.domain.errors import AccessError, ErrorKind
from collab_access.services.capabilities import (
    CapabilityAuthority,
    CapabilityRepository,
    as_utc,
)

logger = logging.getLogger(__name__)


class ShareRepository(CapabilityRepository[ProjectShare], Protocol):
    """Persistence interface for project shares."""


class AdmissionRepository(Protocol):
    """Persistence interface for guest admissions."""

    def create(
        self, token_kind: TokenKind, token_id: UUID, status: AdmissionStatus
    ) -> Admission:
        """Create an admission and return it."""

    def get(self, admission_id: UUID) -> Admission | None:
        """Return an admission by id, if present."""

    def list_for_token(
        self,
        token_kind: TokenKind,
        token_id: UUID,
        status: AdmissionStatus | None = None,
    ) -> list[Admission]:
        """Return admissions of a token, oldest first."""

    def create_within_limit(
        self,
        token_kind: TokenKind,
        token_id: UUID,
        status: AdmissionStatus,
        limit: int | None,
    ) -> Admission | None:
        """Create an admission while fewer than ``limit`` hold ``status``.

        Returns None once the limit is reached. A None limit never blocks.
        The check and the insert happen as one atomic step.
        """

    def decide(
        self, admission_id: UUID, status: AdmissionStatus, decided_at: datetime
    ) -> Admission | None:
        """Move a pending admission to a final status; None if not pending."""


@dataclass(frozen=True)
class ShareParams:
    """Owner-supplied settings for a new share."""

    deadline: datetime | None = None
    requires_approval: bool = False
    permissions: Iterable[str] | None = None

    def tag_set(self) -> SharePermissions:
        if self.permissions is None:
            return SharePermissions()
        tags = frozenset(tag.strip() for tag in self.permissions if tag.strip())
        if not tags:
            raise AccessError(
                ErrorKind.VALIDATION_INPUT, "permissions must not be empty"
            )
        return SharePermissions(tags)


@dataclass
class ShareAuthority(CapabilityAuthority[ProjectShare]):
    """Owns project shares and the approval state of their guests."""

    repository: ShareRepository
    admission_repository: AdmissionRepository

    def create_share(
        self, owner_id: UUID, project_id: UUID, params: ShareParams | None = None
    ) -> ProjectShare:
        """Create a share with a fresh share key; defaults to view only."""
        params = params or ShareParams()
        permissions = params.tag_set()
        deadline = as_utc(params.deadline)
        created_at = self.clock()

        def build(code: str) -> ProjectShare:
            return ProjectShare(
                id=uuid4(),
                project_id=project_id,
                owner_id=owner_id,
                code=code,
                expires_at=deadline,
                is_revoked=False,
                revoked_at=None,
                created_at=created_at,
                permissions=permissions,
                requires_approval=params.requires_approval,
            )

        return self.issue(owner_id, project_id, build)

    def get_share(self, owner_id: UUID, share_id: UUID) -> ProjectShare:
        return self.get_owned(owner_id, share_id)

    def list_shares(
        self, owner_id: UUID, project_id: UUID, include_revoked: bool = False
    ) -> list[ProjectShare]:
        return self.list_owned(owner_id, project_id, include_revoked)

    def renew_share(
        self, owner_id: UUID, share_id: UUID, new_deadline: datetime | None
    ) -> ProjectShare:
        return self.renew(owner_id, share_id, new_deadline)

    def revoke_share(self, owner_id: UUID, share_id: UUID) -> ProjectShare:
        return self.revoke(owner_id, share_id)

    def get_share_by_key(self, share_key: str) -> Validation[ProjectShare]:
        return self.validate(share_key)

    def list_admissions(
        self,
        owner_id: UUID,
        share_id: UUID,
        status: AdmissionStatus | None = None,
    ) -> list[Admission]:
        """Return guests admitted through one of the owner's shares."""
        self.get_owned(owner_id, share_id)
        return self.admission_repository.list_for_token(
            TokenKind.SHARE, share_id, status
        )

    def decide_admission(
        self, owner_id: UUID, admission_id: UUID, approve: bool
    ) -> Admission:
        """Approve or reject a pending admission."""
        admission = self.admission_repository.get(admission_id)
        if admission is None or admission.token_kind != TokenKind.SHARE:
            raise AccessError(ErrorKind.NOT_FOUND)
        self.get_owned(owner_id, admission.token_id)
        if admission.status != AdmissionStatus.PENDING:
            raise AccessError(ErrorKind.TERMINAL, "Admission was already decided")
        status = AdmissionStatus.APPROVED if approve else AdmissionStatus.REJECTED
        decided = self.admission_repository.decide(admission_id, status, self.clock())
        if decided is None:
            raise AccessError(ErrorKind.TERMINAL, "Admission was already decided")
        logger.info(
            "Admission %s for share %s %s", admission_id, admission.token_id, status
        )
        self.audit_service.record_admission_event(owner_id, admission, decided)
        return decided
