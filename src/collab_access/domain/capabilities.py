"""Domain models for capability tokens and the grants derived from them."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Generic, Protocol, TypeVar
from uuid import UUID

from collab_access.domain.errors import ErrorKind

VIEW = "view"
ADD = "add"
EDIT = "edit"
DELETE = "delete"


class TokenKind(StrEnum):
    """Kinds of capability tokens."""

    SESSION = "session"
    SHARE = "share"


class Permissions(Protocol):
    """Permission representation carried by a capability token."""

    def allows(self, action: str, resource_kind: str) -> bool:
        """Return True when the action is granted on the resource kind."""

    def describe(self) -> dict[str, object] | list[str]:
        """Return a JSON-friendly view of the permissions."""


@dataclass(frozen=True)
class SessionPermissions:
    """Fixed boolean flags of a collaboration session."""

    allow_guests: bool = True
    allow_edit: bool = True
    allow_delete: bool = True
    allow_add_scenes: bool = True
    allow_edit_scenes: bool = True

    def allows(self, action: str, resource_kind: str) -> bool:
        """Map an action on a resource kind to the matching flag.

        Nothing is allowed once guests are turned off.
        """
        if not self.allow_guests:
            return False
        if action == VIEW:
            return True
        if action == DELETE:
            return self.allow_delete
        if resource_kind == "scenes":
            if action == ADD:
                return self.allow_add_scenes
            if action == EDIT:
                return self.allow_edit_scenes
        if action in {ADD, EDIT}:
            return self.allow_edit
        return False

    def describe(self) -> dict[str, object]:
        return {
            "allow_guests": self.allow_guests,
            "allow_edit": self.allow_edit,
            "allow_delete": self.allow_delete,
            "allow_add_scenes": self.allow_add_scenes,
            "allow_edit_scenes": self.allow_edit_scenes,
        }


@dataclass(frozen=True)
class SharePermissions:
    """Set of capability tags granted by a project share.

    A bare tag (``edit``) applies to every resource kind, a scoped tag
    (``characters:edit``) to a single one.
    """

    tags: frozenset[str] = frozenset({VIEW})

    def allows(self, action: str, resource_kind: str) -> bool:
        return action in self.tags or f"{resource_kind}:{action}" in self.tags

    def describe(self) -> list[str]:
        return sorted(self.tags)


P = TypeVar("P", SessionPermissions, SharePermissions)


@dataclass(frozen=True)
class CapabilityToken(Generic[P]):
    """A persisted record binding an opaque code to one project."""

    id: UUID
    project_id: UUID
    owner_id: UUID
    code: str
    expires_at: datetime | None
    is_revoked: bool
    revoked_at: datetime | None
    created_at: datetime
    permissions: P

    def liveness(self, now: datetime) -> ErrorKind | None:
        """Return None for a live token, otherwise why it is not live."""
        if self.is_revoked:
            return ErrorKind.REVOKED
        if self.expires_at is not None and now > self.expires_at:
            return ErrorKind.EXPIRED
        return None


@dataclass(frozen=True)
class CollaborationSession(CapabilityToken[SessionPermissions]):
    """Access-code session letting guests work on a project."""

    title: str | None = None
    description: str | None = None
    max_participants: int | None = None

    kind = TokenKind.SESSION

    @property
    def access_code(self) -> str:
        return self.code


@dataclass(frozen=True)
class ProjectShare(CapabilityToken[SharePermissions]):
    """Share-key capability with a tag permission set."""

    requires_approval: bool = False

    kind = TokenKind.SHARE

    @property
    def share_key(self) -> str:
        return self.code

    @property
    def deadline(self) -> datetime | None:
        return self.expires_at


T = TypeVar("T", CollaborationSession, ProjectShare)


@dataclass(frozen=True)
class Validation(Generic[T]):
    """Outcome of checking a code: a live token or the reason it is not."""

    valid: bool
    token: T | None = None
    reason: ErrorKind | None = None

    @classmethod
    def ok(cls, token: T) -> "Validation[T]":
        return cls(valid=True, token=token)

    @classmethod
    def invalid(cls, reason: ErrorKind) -> "Validation[T]":
        return cls(valid=False, reason=reason)


@dataclass(frozen=True)
class ProjectScope:
    """Project boundary every guest-facing data operation runs inside."""

    project_id: UUID


@dataclass(frozen=True)
class AccessGrant:
    """Minimal authorization result handed to guest-facing code.

    Carries project scope and permissions only: no owner, token id or code.
    """

    project_id: UUID
    permissions: Permissions
    token_kind: TokenKind

    @property
    def scope(self) -> ProjectScope:
        return ProjectScope(self.project_id)

    def allows(self, action: str, resource_kind: str) -> bool:
        return self.permissions.allows(action, resource_kind)

    @classmethod
    def from_token(cls, token: CollaborationSession | ProjectShare) -> "AccessGrant":
        return cls(
            project_id=token.project_id,
            permissions=token.permissions,
            token_kind=token.kind,
        )
