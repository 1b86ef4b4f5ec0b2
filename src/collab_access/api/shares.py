"""Project share endpoints for owners and guests."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from collab_access.api.auth import require_owner
from collab_access.api.schemas import (
    ShareCreateRequest,
    ShareRenewRequest,
    admission_view,
    share_view,
)
from collab_access.domain.admissions import AdmissionStatus  # noqa: TC001
from collab_access.domain.capabilities import TokenKind
from collab_access.domain.resources import ResourceQuery

if TYPE_CHECKING:
    from collab_access.containers import AppContainer

router = APIRouter(prefix="/project-shares", tags=["shares"])


@router.get("/access/{share_key}")
async def share_overview(share_key: str, request: Request) -> dict[str, object]:
    """Public share details and project summary for a share key."""
    container: AppContainer = request.app.state.container
    return container.gateway.share_overview(share_key)


@router.post("/access/{share_key}/admissions", status_code=status.HTTP_201_CREATED)
async def request_admission(share_key: str, request: Request) -> dict[str, object]:
    """Ask the owner for access; the returned id goes with later reads."""
    container: AppContainer = request.app.state.container
    admission = container.gateway.request_admission(share_key)
    return {"admission": admission_view(admission)}


@router.get("/access/{share_key}/{resource_kind}")
async def read_shared(
    share_key: str,
    resource_kind: str,
    request: Request,
    admission_id: UUID | None = None,
    limit: int | None = None,
) -> dict[str, object]:
    """Read a resource of the shared project."""
    container: AppContainer = request.app.state.container
    grant = container.gateway.resolve(share_key, TokenKind.SHARE, admission_id)
    if resource_kind == "project":
        return {"project": container.gateway.project_summary(grant)}
    rows = container.gateway.read_scoped(
        grant, resource_kind, ResourceQuery(limit=limit)
    )
    return {resource_kind: rows}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_share(
    body: ShareCreateRequest,
    request: Request,
    owner_id: UUID = Depends(require_owner),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    share = container.share_authority.create_share(
        owner_id, body.project_id, body.to_params()
    )
    return {"share": share_view(share)}


@router.get("")
async def list_shares(
    project_id: UUID,
    request: Request,
    include_revoked: bool = False,
    owner_id: UUID = Depends(require_owner),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    shares = container.share_authority.list_shares(
        owner_id, project_id, include_revoked
    )
    return {"shares": [share_view(share) for share in shares]}


@router.post("/admissions/{admission_id}/approve")
async def approve_admission(
    admission_id: UUID, request: Request, owner_id: UUID = Depends(require_owner)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    admission = container.share_authority.decide_admission(
        owner_id, admission_id, approve=True
    )
    return {"admission": admission_view(admission)}


@router.post("/admissions/{admission_id}/reject")
async def reject_admission(
    admission_id: UUID, request: Request, owner_id: UUID = Depends(require_owner)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    admission = container.share_authority.decide_admission(
        owner_id, admission_id, approve=False
    )
    return {"admission": admission_view(admission)}


@router.get("/{share_id}")
async def get_share(
    share_id: UUID, request: Request, owner_id: UUID = Depends(require_owner)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    share = container.share_authority.get_share(owner_id, share_id)
    return {"share": share_view(share)}


@router.post("/{share_id}/renew")
async def renew_share(
    share_id: UUID,
    body: ShareRenewRequest,
    request: Request,
    owner_id: UUID = Depends(require_owner),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    share = container.share_authority.renew_share(owner_id, share_id, body.deadline)
    return {"share": share_view(share)}


@router.post("/{share_id}/revoke")
async def revoke_share(
    share_id: UUID, request: Request, owner_id: UUID = Depends(require_owner)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    share = container.share_authority.revoke_share(owner_id, share_id)
    return {"share": share_view(share)}


@router.get("/{share_id}/admissions")
async def list_admissions(
    share_id: UUID,
    request: Request,
    admission_status: AdmissionStatus | None = Query(default=None, alias="status"),
    owner_id: UUID = Depends(require_owner),
) -> dict[str, object]:
    """Guests waiting on or decided for a share."""
    container: AppContainer = request.app.state.container
    admissions = container.share_authority.list_admissions(
        owner_id, share_id, admission_status
    )
    return {"admissions": [admission_view(admission) for admission in admissions]}
