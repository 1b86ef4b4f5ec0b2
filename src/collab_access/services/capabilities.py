"""Lifecycle rules shared by sessions and shares."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, Protocol, TypeVar
from uuid import UUID

from collab_access.domain.capabilities import (
    CollaborationSession,
    ProjectShare,
    Validation,
)
from collab_access.domain.errors import AccessError, CodeCollisionError, ErrorKind
from collab_access.services.audit import AuditService
from collab_access.services.codes import CodeGenerator
from collab_access.services.projects import ProjectDirectory

logger = logging.getLogger(__name__)

DEFAULT_GENERATION_ATTEMPTS = 5

T = TypeVar("T", CollaborationSession, ProjectShare)


class CapabilityRepository(Protocol[T]):
    """Persistence interface for capability tokens of one kind."""

    def insert(self, token: T) -> T:
        """Persist a new token; raise CodeCollisionError if its code is taken."""

    def get(self, token_id: UUID) -> T | None:
        """Return a token by id, if present."""

    def get_by_code(self, code: str) -> T | None:
        """Return the token holding a code, if present."""

    def list_for_project(self, project_id: UUID, owner_id: UUID) -> list[T]:
        """Return an owner's tokens for a project, newest first."""

    def set_expiry(self, token_id: UUID, expires_at: datetime | None) -> T | None:
        """Set the expiry of a token that is not revoked; None if none matched."""

    def mark_revoked(self, token_id: UUID, revoked_at: datetime) -> T | None:
        """Revoke a token that is not revoked yet; None if none matched."""


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


@dataclass
class CapabilityAuthority(Generic[T]):
    """Issues, renews, revokes and validates tokens of one kind."""

    repository: CapabilityRepository[T]
    project_directory: ProjectDirectory
    code_generator: CodeGenerator
    audit_service: AuditService
    max_attempts: int = field(default=DEFAULT_GENERATION_ATTEMPTS, kw_only=True)
    clock: Callable[[], datetime] = field(default=utc_now, kw_only=True)

    def issue(
        self, owner_id: UUID, project_id: UUID, build: Callable[[str], T]
    ) -> T:
        """Persist ``build(code)`` under a fresh code, retrying on collisions."""
        self.require_project_owner(owner_id, project_id)
        for attempt in range(1, self.max_attempts + 1):
            candidate = build(self.code_generator.generate())
            try:
                token = self.repository.insert(candidate)
            except CodeCollisionError:
                logger.warning(
                    "Code collision issuing %s (attempt %s/%s)",
                    candidate.kind,
                    attempt,
                    self.max_attempts,
                )
                continue
            logger.info(
                "Issued %s %s for project %s", token.kind, token.id, project_id
            )
            self.audit_service.record_token_event(owner_id, "created", token)
            return token
        logger.error(
            "Gave up issuing a code for project %s after %s attempts",
            project_id,
            self.max_attempts,
        )
        raise AccessError(ErrorKind.GENERATION_EXHAUSTED)

    def require_project_owner(self, owner_id: UUID, project_id: UUID) -> None:
        """Unknown projects are refused the same way as foreign ones."""
        if self.project_directory.get_owner_id(project_id) != owner_id:
            raise AccessError(ErrorKind.FORBIDDEN, "You do not own this project")

    def get_owned(self, owner_id: UUID, token_id: UUID) -> T:
        """Return a token the caller owns."""
        token = self.repository.get(token_id)
        if token is None:
            raise AccessError(ErrorKind.NOT_FOUND)
        if token.owner_id != owner_id:
            raise AccessError(ErrorKind.FORBIDDEN)
        return token

    def list_owned(
        self, owner_id: UUID, project_id: UUID, include_revoked: bool = False
    ) -> list[T]:
        tokens = self.repository.list_for_project(project_id, owner_id)
        if include_revoked:
            return tokens
        return [token for token in tokens if not token.is_revoked]

    def renew(self, owner_id: UUID, token_id: UUID, expires_at: datetime | None) -> T:
        """Move or clear the expiry of a token that has not been revoked."""
        expires_at = as_utc(expires_at)
        current = self.get_owned(owner_id, token_id)
        if current.is_revoked:
            raise AccessError(ErrorKind.TERMINAL)
        if current.expires_at == expires_at:
            return current
        renewed = self.repository.set_expiry(token_id, expires_at)
        if renewed is None:
            # Revoked between the read and the conditional write.
            raise AccessError(ErrorKind.TERMINAL)
        logger.info("Renewed %s %s until %s", renewed.kind, token_id, expires_at)
        self.audit_service.record_token_event(
            owner_id, "renewed", renewed, before=current
        )
        return renewed

    def revoke(self, owner_id: UUID, token_id: UUID) -> T:
        """Revoke a token; revoking again returns the first revocation."""
        current = self.get_owned(owner_id, token_id)
        if current.is_revoked:
            return current
        revoked = self.repository.mark_revoked(token_id, self.clock())
        if revoked is None:
            revoked = self.repository.get(token_id)
            if revoked is None:
                raise AccessError(ErrorKind.NOT_FOUND)
            return revoked
        logger.info("Revoked %s %s", revoked.kind, token_id)
        self.audit_service.record_token_event(
            owner_id, "revoked", revoked, before=current
        )
        return revoked

    def validate(self, code: str) -> Validation[T]:
        """Check a code against the store; nothing here is cached."""
        cleaned = code.strip()
        if not cleaned:
            return Validation.invalid(ErrorKind.NOT_FOUND)
        token = self.repository.get_by_code(cleaned)
        if token is None:
            return Validation.invalid(ErrorKind.NOT_FOUND)
        reason = token.liveness(self.clock())
        if reason is not None:
            return Validation.invalid(reason)
        return Validation.ok(token)
