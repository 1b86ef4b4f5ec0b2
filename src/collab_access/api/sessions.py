"""Owner endpoints for collaboration sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from collab_access.api.auth import require_owner
from collab_access.api.schemas import (
    SessionCreateRequest,
    SessionDetailsRequest,
    SessionRenewRequest,
    session_view,
)

if TYPE_CHECKING:
    from collab_access.containers import AppContainer

router = APIRouter(prefix="/collaboration/sessions", tags=["sessions"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(
    body: SessionCreateRequest,
    request: Request,
    owner_id: UUID = Depends(require_owner),
) -> dict[str, object]:
    """Open a session and return its access code."""
    container: AppContainer = request.app.state.container
    session = container.session_authority.create_session(
        owner_id, body.project_id, body.to_params()
    )
    return {"session": session_view(session)}


@router.get("")
async def list_sessions(
    project_id: UUID,
    request: Request,
    include_revoked: bool = False,
    owner_id: UUID = Depends(require_owner),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    sessions = container.session_authority.list_sessions(
        owner_id, project_id, include_revoked
    )
    return {"sessions": [session_view(session) for session in sessions]}


@router.get("/{session_id}")
async def get_session(
    session_id: UUID, request: Request, owner_id: UUID = Depends(require_owner)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    session = container.session_authority.get_session(owner_id, session_id)
    return {"session": session_view(session)}


@router.patch("/{session_id}")
async def update_session(
    session_id: UUID,
    body: SessionDetailsRequest,
    request: Request,
    owner_id: UUID = Depends(require_owner),
) -> dict[str, object]:
    """Change the session title and description."""
    container: AppContainer = request.app.state.container
    session = container.session_authority.update_session_details(
        owner_id, session_id, body.title, body.description
    )
    return {"session": session_view(session)}


@router.post("/{session_id}/renew")
async def renew_session(
    session_id: UUID,
    body: SessionRenewRequest,
    request: Request,
    owner_id: UUID = Depends(require_owner),
) -> dict[str, object]:
    """Move or clear the expiry; a null ``expires_at`` never expires."""
    container: AppContainer = request.app.state.container
    session = container.session_authority.renew_session(
        owner_id, session_id, body.expires_at
    )
    return {"session": session_view(session)}


@router.post("/{session_id}/revoke")
async def revoke_session(
    session_id: UUID, request: Request, owner_id: UUID = Depends(require_owner)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    session = container.session_authority.revoke_session(owner_id, session_id)
    return {"session": session_view(session)}
