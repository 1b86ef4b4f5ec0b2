"""Error taxonomy for capability authorization."""

from enum import StrEnum
from uuid import UUID


class ErrorKind(StrEnum):
    """Structured failure reasons callers can branch on."""

    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    REVOKED = "revoked"
    TERMINAL = "terminal"
    FORBIDDEN = "forbidden"
    GENERATION_EXHAUSTED = "generation_exhausted"
    VALIDATION_INPUT = "validation_input"
    PENDING_APPROVAL = "pending_approval"
    REJECTED = "rejected"


_DEFAULT_MESSAGES = {
    ErrorKind.NOT_FOUND: "Not found",
    ErrorKind.EXPIRED: "This access code has expired",
    ErrorKind.REVOKED: "This access code has been revoked",
    ErrorKind.TERMINAL: "This record has been revoked and cannot be changed",
    ErrorKind.FORBIDDEN: "Not allowed",
    ErrorKind.GENERATION_EXHAUSTED: "Could not generate a unique code",
    ErrorKind.VALIDATION_INPUT: "Invalid input",
    ErrorKind.PENDING_APPROVAL: "Access is waiting for owner approval",
    ErrorKind.REJECTED: "Access was rejected by the owner",
}

_INVALID_KINDS = frozenset({ErrorKind.NOT_FOUND, ErrorKind.REVOKED, ErrorKind.EXPIRED})

GUEST_INVALID_MESSAGE = "Invalid or expired access code"


class AccessError(Exception):
    """Raised by authorities and the guest gateway with a structured kind."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        super().__init__(message or _DEFAULT_MESSAGES[kind])

    @property
    def message(self) -> str:
        return str(self)


class AuthorizationError(AccessError):
    """Guest-facing failure to turn a code or key into an access grant.

    ``kind`` keeps the precise reason for logging. ``public_message`` is what
    a guest may see: unknown, revoked and expired codes look the same.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        admission_id: UUID | None = None,
    ) -> None:
        super().__init__(kind, message)
        self.admission_id = admission_id

    @property
    def public_message(self) -> str:
        if self.kind in _INVALID_KINDS:
            return GUEST_INVALID_MESSAGE
        return self.message


class CodeCollisionError(Exception):
    """Raised by a store when an inserted code is already taken."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__("Capability code already exists")
