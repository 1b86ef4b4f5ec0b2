"""Guest endpoints: everything here is authorized by an access code."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Request, Response, status

from collab_access.api.errors import INVALID_CODE_TYPE
from collab_access.api.schemas import (
    AccessCodeRequest,
    GuestWriteRequest,
    admission_view,
    guest_session_view,
)
from collab_access.domain.capabilities import ADD, DELETE, EDIT
from collab_access.domain.resources import ResourceQuery, WriteOperation

if TYPE_CHECKING:
    from collab_access.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/collaboration", tags=["guest"])

_RESERVED_PARAMS = frozenset({"access_code", "admission_id", "limit"})


@router.post("/validate")
async def validate_access_code(
    body: AccessCodeRequest, request: Request
) -> dict[str, object]:
    """Tell a guest whether their code opens a live session."""
    container: AppContainer = request.app.state.container
    validation = container.session_authority.validate_access_code(body.access_code)
    if not validation.valid or validation.token is None:
        logger.info("Access code validation failed: %s", validation.reason)
        return {"valid": False, "reason": INVALID_CODE_TYPE}
    return {"valid": True, "session": guest_session_view(validation.token)}


@router.post("/join", status_code=status.HTTP_201_CREATED)
async def join_session(body: AccessCodeRequest, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    admission = container.gateway.join_session(body.access_code)
    return {"admission": admission_view(admission)}


@router.get("/project")
async def project_summary(
    access_code: str, request: Request, admission_id: UUID | None = None
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    grant = container.gateway.resolve(access_code, admission_id=admission_id)
    return {"project": container.gateway.project_summary(grant)}


@router.get("/{resource_kind}")
async def list_resources(
    resource_kind: str,
    access_code: str,
    request: Request,
    admission_id: UUID | None = None,
    limit: int | None = None,
) -> dict[str, object]:
    """List project rows; other query parameters are equality filters."""
    container: AppContainer = request.app.state.container
    grant = container.gateway.resolve(access_code, admission_id=admission_id)
    filters = {
        name: value
        for name, value in request.query_params.items()
        if name not in _RESERVED_PARAMS
    }
    rows = container.gateway.read_scoped(
        grant, resource_kind, ResourceQuery(filters=filters, limit=limit)
    )
    return {resource_kind: rows}


@router.get("/{resource_kind}/{record_id}")
async def get_resource(
    resource_kind: str,
    record_id: UUID,
    access_code: str,
    request: Request,
    admission_id: UUID | None = None,
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    grant = container.gateway.resolve(access_code, admission_id=admission_id)
    row = container.gateway.get_scoped(grant, resource_kind, record_id)
    return {"record": row}


@router.post("/{resource_kind}", status_code=status.HTTP_201_CREATED)
async def add_resource(
    resource_kind: str, body: GuestWriteRequest, request: Request
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    grant = container.gateway.resolve(body.access_code, admission_id=body.admission_id)
    row = container.gateway.write_scoped(
        grant, WriteOperation(ADD, resource_kind, values=body.values)
    )
    return {"record": row}


@router.patch("/{resource_kind}/{record_id}")
async def edit_resource(
    resource_kind: str, record_id: UUID, body: GuestWriteRequest, request: Request
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    grant = container.gateway.resolve(body.access_code, admission_id=body.admission_id)
    row = container.gateway.write_scoped(
        grant, WriteOperation(EDIT, resource_kind, record_id, body.values)
    )
    return {"record": row}


@router.delete("/{resource_kind}/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resource(
    resource_kind: str,
    record_id: UUID,
    access_code: str,
    request: Request,
    admission_id: UUID | None = None,
) -> Response:
    container: AppContainer = request.app.state.container
    grant = container.gateway.resolve(access_code, admission_id=admission_id)
    container.gateway.write_scoped(
        grant, WriteOperation(DELETE, resource_kind, record_id)
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
