"""Supabase-backed project share repository."""

from dataclasses import dataclass
from uuid import UUID

from collab_access.adapters.supabase_capability_repository import (
    SupabaseCapabilityRepository,
    format_timestamp,
    parse_timestamp,
)
from collab_access.domain.capabilities import (
    ADD,
    EDIT,
    VIEW,
    ProjectShare,
    SharePermissions,
)
from collab_access.services.shares import ShareRepository


@dataclass
class SupabaseShareRepository(
    SupabaseCapabilityRepository[ProjectShare], ShareRepository
):
    """Supabase implementation for project shares."""

    table_name = "project_shares"
    code_column = "share_key"
    expiry_column = "deadline"
    owner_column = "owner_id"
    columns = (
        "id, project_id, owner_id, share_key, deadline, requires_approval, "
        "permissions, is_revoked, revoked_at, created_at"
    )

    def _to_row(self, token: ProjectShare) -> dict[str, object]:
        return {
            "id": str(token.id),
            "project_id": str(token.project_id),
            "owner_id": str(token.owner_id),
            "share_key": token.code,
            "deadline": format_timestamp(token.deadline),
            "requires_approval": token.requires_approval,
            "permissions": token.permissions.describe(),
            "is_revoked": token.is_revoked,
            "revoked_at": format_timestamp(token.revoked_at),
            "created_at": format_timestamp(token.created_at),
        }

    def _from_row(self, row: dict[str, object]) -> ProjectShare:
        created_at = parse_timestamp(row.get("created_at"))
        if created_at is None:
            raise RuntimeError("Share row is missing created_at")
        return ProjectShare(
            id=UUID(str(row["id"])),
            project_id=UUID(str(row["project_id"])),
            owner_id=UUID(str(row["owner_id"])),
            code=str(row["share_key"]),
            expires_at=parse_timestamp(row.get("deadline")),
            is_revoked=bool(row.get("is_revoked", False)),
            revoked_at=parse_timestamp(row.get("revoked_at")),
            created_at=created_at,
            permissions=SharePermissions(parse_permission_tags(row.get("permissions"))),
            requires_approval=bool(row.get("requires_approval", False)),
        )


# Pages of the per-page map whose rows live in the scenes table.
_SCENE_PAGES = frozenset({"timeline", "screenplay"})
_SCENE_ACTIONS = {"add_scenes": ADD, "edit_scenes": EDIT}


def parse_permission_tags(raw: object) -> frozenset[str]:
    """Read stored permissions as tags.

    Accepts a list of tags or the per-page map
    (``{"characters": {"view": true, "edit": false}}``), which becomes
    resource-scoped tags such as ``characters:view``. The ``timeline`` and
    ``screenplay`` pages grant on ``scenes`` (``add_scenes`` is ``scenes:add``)
    and viewing any page also allows viewing the project summary.
    """
    if isinstance(raw, list):
        return frozenset(str(tag) for tag in raw if tag)
    if not isinstance(raw, dict):
        return frozenset()
    tags = set()
    for page, actions in raw.items():
        if actions is True:
            tags.add(str(page))
            continue
        if not isinstance(actions, dict):
            continue
        for action, granted in actions.items():
            if granted is not True:
                continue
            if page in _SCENE_PAGES:
                tags.add(f"scenes:{_SCENE_ACTIONS.get(action, action)}")
            else:
                tags.add(f"{page}:{action}")
            if action == VIEW:
                tags.add(f"project:{VIEW}")
    return frozenset(tags)
