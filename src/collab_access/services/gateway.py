"""Guest-facing access to project data through capability tokens.

Guests never hold an identity. A code or key is resolved into an
``AccessGrant`` and every data operation takes that grant explicitly; the
project store only accepts the grant's ``ProjectScope``.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from uuid import UUID

from collab_access.domain.admissions import Admission, AdmissionStatus
from collab_access.domain.capabilities import (
    ADD,
    DELETE,
    EDIT,
    VIEW,
    AccessGrant,
    CollaborationSession,
    ProjectShare,
    TokenKind,
    Validation,
)
from collab_access.domain.errors import AccessError, AuthorizationError, ErrorKind
from collab_access.domain.resources import (
    RESOURCES,
    ResourceQuery,
    ResourceSpec,
    WriteOperation,
)
from collab_access.services.projects import ProjectDataStore
from collab_access.services.sessions import SessionAuthority
from collab_access.services.shares import AdmissionRepository, ShareAuthority

logger = logging.getLogger(__name__)

MAX_READ_LIMIT = 500
MAX_PENDING_ADMISSIONS = 20


@dataclass
class GuestAccessGateway:
    """Turns codes into grants and runs project-scoped reads and writes."""

    session_authority: SessionAuthority
    share_authority: ShareAuthority
    admission_repository: AdmissionRepository
    project_store: ProjectDataStore

    def resolve(
        self,
        code: str,
        kind: TokenKind | None = None,
        admission_id: UUID | None = None,
    ) -> AccessGrant:
        """Validate a code or key and return the grant it carries.

        Without ``kind`` the code is tried as a session code, then as a share
        key.
        """
        if kind == TokenKind.SESSION:
            return AccessGrant.from_token(self._live_session(code))
        if kind == TokenKind.SHARE:
            return self._resolve_share(code, admission_id)
        validation = self.session_authority.validate_access_code(code)
        if validation.reason == ErrorKind.NOT_FOUND:
            return self._resolve_share(code, admission_id)
        return AccessGrant.from_token(self._guest_session(validation))

    def join_session(self, code: str) -> Admission:
        """Admit a new participant, honouring the session's participant cap.

        The cap is checked by the store in the same step as the insert, so
        concurrent joins cannot overshoot it.
        """
        session = self._live_session(code)
        admission = self.admission_repository.create_within_limit(
            TokenKind.SESSION,
            session.id,
            AdmissionStatus.APPROVED,
            session.max_participants,
        )
        if admission is None:
            logger.info("Session %s is full", session.id)
            raise AuthorizationError(
                ErrorKind.FORBIDDEN, "This session has reached its participant limit"
            )
        return admission

    def request_admission(self, share_key: str) -> Admission:
        """Ask the owner of an approval-gated share to let a guest in."""
        validation = self.share_authority.get_share_by_key(share_key)
        if not validation.valid or validation.token is None:
            raise self._rejected(TokenKind.SHARE, validation.reason)
        share = validation.token
        if not share.requires_approval:
            raise AccessError(
                ErrorKind.VALIDATION_INPUT, "This share does not require approval"
            )
        admission = self.admission_repository.create_within_limit(
            TokenKind.SHARE, share.id, AdmissionStatus.PENDING, MAX_PENDING_ADMISSIONS
        )
        if admission is None:
            logger.warning("Share %s has too many pending admissions", share.id)
            raise AuthorizationError(
                ErrorKind.FORBIDDEN, "Too many requests are waiting for approval"
            )
        logger.info("Admission %s pending for share %s", admission.id, share.id)
        return admission

    def share_overview(self, share_key: str) -> dict[str, object]:
        """Return the public share fields and the shared project's summary."""
        validation = self.share_authority.get_share_by_key(share_key)
        if not validation.valid or validation.token is None:
            raise self._rejected(TokenKind.SHARE, validation.reason)
        share = validation.token
        grant = AccessGrant.from_token(share)
        project = self.project_store.get_summary(grant.scope)
        if project is None:
            raise AccessError(ErrorKind.NOT_FOUND, "Project not found")
        return {"share": public_share(share), "project": project}

    def project_summary(self, grant: AccessGrant) -> dict[str, object]:
        if not grant.allows(VIEW, "project"):
            raise AccessError(ErrorKind.FORBIDDEN, "Viewing is not allowed")
        project = self.project_store.get_summary(grant.scope)
        if project is None:
            raise AccessError(ErrorKind.NOT_FOUND, "Project not found")
        return project

    def read_scoped(
        self,
        grant: AccessGrant,
        resource_kind: str,
        query: ResourceQuery | None = None,
    ) -> list[dict[str, object]]:
        """Return rows of a resource kind inside the grant's project."""
        spec = _resource(resource_kind)
        if not grant.allows(VIEW, resource_kind):
            raise AccessError(ErrorKind.FORBIDDEN, "Viewing is not allowed")
        query = query or ResourceQuery()
        _check_query(spec, query)
        return self.project_store.select(grant.scope, spec, query)

    def get_scoped(
        self, grant: AccessGrant, resource_kind: str, record_id: UUID
    ) -> dict[str, object]:
        spec = _resource(resource_kind)
        if not grant.allows(VIEW, resource_kind):
            raise AccessError(ErrorKind.FORBIDDEN, "Viewing is not allowed")
        row = self.project_store.get(grant.scope, spec, record_id)
        if row is None:
            raise AccessError(ErrorKind.NOT_FOUND, f"{_singular(spec)} not found")
        return row

    def write_scoped(
        self, grant: AccessGrant, operation: WriteOperation
    ) -> dict[str, object] | None:
        """Apply an add, edit or delete the grant permits."""
        spec = _resource(operation.resource_kind)
        if operation.action not in {ADD, EDIT, DELETE}:
            raise AccessError(
                ErrorKind.VALIDATION_INPUT, f"Unknown action: {operation.action}"
            )
        if not grant.allows(operation.action, spec.kind):
            raise AccessError(
                ErrorKind.FORBIDDEN,
                f"{operation.action.capitalize()} is not allowed for {spec.kind}",
            )
        if operation.action == ADD:
            values = _writable_values(spec, operation.values)
            missing = [name for name in spec.required_on_add if not values.get(name)]
            if missing:
                raise AccessError(
                    ErrorKind.VALIDATION_INPUT, f"{missing[0]} is required"
                )
            return self.project_store.insert(grant.scope, spec, values)

        if operation.record_id is None:
            raise AccessError(ErrorKind.VALIDATION_INPUT, "record id is required")
        if operation.action == DELETE:
            if not self.project_store.delete(grant.scope, spec, operation.record_id):
                raise AccessError(ErrorKind.NOT_FOUND, f"{_singular(spec)} not found")
            return None

        values = _writable_values(spec, operation.values)
        if not values:
            raise AccessError(ErrorKind.VALIDATION_INPUT, "Nothing to update")
        row = self.project_store.update(
            grant.scope, spec, operation.record_id, values
        )
        if row is None:
            raise AccessError(ErrorKind.NOT_FOUND, f"{_singular(spec)} not found")
        return row

    def _live_session(self, code: str) -> CollaborationSession:
        return self._guest_session(self.session_authority.validate_access_code(code))

    def _guest_session(
        self, validation: Validation[CollaborationSession]
    ) -> CollaborationSession:
        if not validation.valid or validation.token is None:
            raise self._rejected(TokenKind.SESSION, validation.reason)
        session = validation.token
        if not session.permissions.allow_guests:
            raise AuthorizationError(
                ErrorKind.FORBIDDEN, "Guests are not allowed in this session"
            )
        return session

    def _resolve_share(self, share_key: str, admission_id: UUID | None) -> AccessGrant:
        validation = self.share_authority.get_share_by_key(share_key)
        if not validation.valid or validation.token is None:
            raise self._rejected(TokenKind.SHARE, validation.reason)
        share = validation.token
        if share.requires_approval:
            self._require_approved(share, admission_id)
        return AccessGrant.from_token(share)

    def _require_approved(self, share: ProjectShare, admission_id: UUID | None) -> None:
        if admission_id is None:
            raise AuthorizationError(
                ErrorKind.PENDING_APPROVAL,
                "Request access and wait for owner approval",
            )
        admission = self.admission_repository.get(admission_id)
        if (
            admission is None
            or admission.token_kind != TokenKind.SHARE
            or admission.token_id != share.id
        ):
            raise self._rejected(TokenKind.SHARE, ErrorKind.NOT_FOUND)
        if admission.status == AdmissionStatus.PENDING:
            raise AuthorizationError(
                ErrorKind.PENDING_APPROVAL, admission_id=admission.id
            )
        if admission.status == AdmissionStatus.REJECTED:
            raise AuthorizationError(ErrorKind.REJECTED, admission_id=admission.id)

    @staticmethod
    def _rejected(kind: TokenKind, reason: ErrorKind | None) -> AuthorizationError:
        reason = reason or ErrorKind.NOT_FOUND
        logger.warning("Rejected %s code: %s", kind, reason)
        return AuthorizationError(reason)


def public_share(share: ProjectShare) -> dict[str, object]:
    """Share fields a guest may see."""
    return {
        "id": str(share.id),
        "share_key": share.share_key,
        "deadline": share.deadline.isoformat() if share.deadline else None,
        "requires_approval": share.requires_approval,
        "permissions": share.permissions.describe(),
        "created_at": share.created_at.isoformat(),
    }


def _resource(resource_kind: str) -> ResourceSpec:
    spec = RESOURCES.get(resource_kind)
    if spec is None:
        raise AccessError(
            ErrorKind.VALIDATION_INPUT, f"Unknown resource kind: {resource_kind}"
        )
    return spec


def _check_query(spec: ResourceSpec, query: ResourceQuery) -> None:
    """Refuse filters outside the resource's filterable columns.

    Scope columns are never filterable, so a guest cannot point a query at
    another project.
    """
    for column in query.filters:
        if column not in spec.filterable:
            raise AccessError(
                ErrorKind.VALIDATION_INPUT, f"Cannot filter {spec.kind} by {column}"
            )
    if query.limit is not None and not 0 < query.limit <= MAX_READ_LIMIT:
        raise AccessError(
            ErrorKind.VALIDATION_INPUT, f"limit must be between 1 and {MAX_READ_LIMIT}"
        )


def _writable_values(
    spec: ResourceSpec, values: Mapping[str, object]
) -> dict[str, object]:
    unknown = sorted(set(values) - spec.writable)
    if unknown:
        raise AccessError(
            ErrorKind.VALIDATION_INPUT, f"Cannot write {spec.kind}.{unknown[0]}"
        )
    return dict(values)


def _singular(spec: ResourceSpec) -> str:
    return spec.kind.removesuffix("s").capitalize()
