"""Translate access failures into HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from collab_access.domain.errors import AccessError, AuthorizationError, ErrorKind

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.EXPIRED: status.HTTP_403_FORBIDDEN,
    ErrorKind.REVOKED: status.HTTP_403_FORBIDDEN,
    ErrorKind.TERMINAL: status.HTTP_409_CONFLICT,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.GENERATION_EXHAUSTED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.VALIDATION_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.PENDING_APPROVAL: status.HTTP_403_FORBIDDEN,
    ErrorKind.REJECTED: status.HTTP_403_FORBIDDEN,
}

# Guests are not told whether a code is unknown, revoked or expired.
INVALID_CODE_TYPE = "invalid_or_expired"
_HIDDEN_KINDS = frozenset({ErrorKind.NOT_FOUND, ErrorKind.REVOKED, ErrorKind.EXPIRED})


async def _access_error(request: Request, exc: AccessError) -> JSONResponse:
    status_code = _STATUS_CODES[exc.kind]
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.kind)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "type": str(exc.kind)},
    )


async def _authorization_error(
    request: Request, exc: AuthorizationError
) -> JSONResponse:
    if exc.kind in _HIDDEN_KINDS:
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": exc.public_message, "type": INVALID_CODE_TYPE},
        )
    content: dict[str, object] = {
        "error": exc.public_message,
        "type": str(exc.kind),
    }
    if exc.admission_id is not None:
        content["admission_id"] = str(exc.admission_id)
    return JSONResponse(status_code=_STATUS_CODES[exc.kind], content=content)


def register_error_handlers(app: FastAPI) -> None:
    """Install handlers for the access error hierarchy."""
    app.add_exception_handler(AuthorizationError, _authorization_error)
    app.add_exception_handler(AccessError, _access_error)
