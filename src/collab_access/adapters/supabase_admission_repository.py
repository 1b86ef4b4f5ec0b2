"""Supabase-backed admission repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from collab_access.domain.admissions import Admission, AdmissionStatus
from collab_access.domain.capabilities import TokenKind
from collab_access.services.shares import AdmissionRepository

_COLUMNS = "id, token_kind, token_id, status, created_at, decided_at"


@dataclass
class SupabaseAdmissionRepository(AdmissionRepository):
    """Supabase implementation for guest admissions."""

    client: Client

    def create(
        self, token_kind: TokenKind, token_id: UUID, status: AdmissionStatus
    ) -> Admission:
        """Create an admission row and return it."""
        response = (
            self.client.table("capability_admissions")
            .insert(
                {
                    "token_kind": str(token_kind),
                    "token_id": str(token_id),
                    "status": str(status),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create admission")
        return _to_admission(response.data[0])

    def get(self, admission_id: UUID) -> Admission | None:
        response = (
            self.client.table("capability_admissions")
            .select(_COLUMNS)
            .eq("id", str(admission_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_admission(response.data[0])

    def list_for_token(
        self,
        token_kind: TokenKind,
        token_id: UUID,
        status: AdmissionStatus | None = None,
    ) -> list[Admission]:
        """Return admissions of a token, oldest first."""
        query = (
            self.client.table("capability_admissions")
            .select(_COLUMNS)
            .eq("token_kind", str(token_kind))
            .eq("token_id", str(token_id))
        )
        if status is not None:
            query = query.eq("status", str(status))
        response = query.order("created_at").execute()
        return [_to_admission(row) for row in response.data or []]

    def create_within_limit(
        self,
        token_kind: TokenKind,
        token_id: UUID,
        status: AdmissionStatus,
        limit: int | None,
    ) -> Admission | None:
        """Count and insert inside one database function call.

        See supabase/migrations for ``create_admission_within_limit``; it
        returns no row when the limit is reached.
        """
        if limit is None:
            return self.create(token_kind, token_id, status)
        response = self.client.rpc(
            "create_admission_within_limit",
            {
                "p_token_kind": str(token_kind),
                "p_token_id": str(token_id),
                "p_status": str(status),
                "p_limit": limit,
            },
        ).execute()
        if not response.data:
            return None
        return _to_admission(response.data[0])

    def decide(
        self, admission_id: UUID, status: AdmissionStatus, decided_at: datetime
    ) -> Admission | None:
        """Finalize a pending admission; decided rows are left untouched."""
        response = (
            self.client.table("capability_admissions")
            .update({"status": str(status), "decided_at": decided_at.isoformat()})
            .eq("id", str(admission_id))
            .eq("status", str(AdmissionStatus.PENDING))
            .execute()
        )
        if not response.data:
            return None
        return _to_admission(response.data[0])


def _to_admission(row: dict[str, object]) -> Admission:
    decided_at = row.get("decided_at")
    return Admission(
        id=UUID(str(row["id"])),
        token_kind=TokenKind(str(row["token_kind"])),
        token_id=UUID(str(row["token_id"])),
        status=AdmissionStatus(str(row["status"])),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        decided_at=datetime.fromisoformat(decided_at)
        if isinstance(decided_at, str) and decided_at
        else None,
    )
