"""Supabase persistence shared by session and share repositories."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Generic, TypeVar
from uuid import UUID

from supabase import Client, PostgrestAPIError

from collab_access.domain.capabilities import CollaborationSession, ProjectShare
from collab_access.domain.errors import CodeCollisionError

_UNIQUE_VIOLATION = "23505"

T = TypeVar("T", CollaborationSession, ProjectShare)


def parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class SupabaseCapabilityRepository(ABC, Generic[T]):
    """Common table access for capability tokens.

    Subclasses name their table and columns and convert rows.
    """

    client: Client

    table_name: ClassVar[str]
    code_column: ClassVar[str]
    expiry_column: ClassVar[str]
    owner_column: ClassVar[str]
    columns: ClassVar[str]

    def insert(self, token: T) -> T:
        """Insert a token row; a duplicate code raises CodeCollisionError."""
        try:
            response = (
                self.client.table(self.table_name).insert(self._to_row(token)).execute()
            )
        except PostgrestAPIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise CodeCollisionError(token.code) from exc
            raise
        if not response.data:
            raise RuntimeError(f"Failed to insert into {self.table_name}")
        return self._from_row(response.data[0])

    def get(self, token_id: UUID) -> T | None:
        response = (
            self.client.table(self.table_name)
            .select(self.columns)
            .eq("id", str(token_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return self._from_row(response.data[0])

    def get_by_code(self, code: str) -> T | None:
        response = (
            self.client.table(self.table_name)
            .select(self.columns)
            .eq(self.code_column, code)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return self._from_row(response.data[0])

    def list_for_project(self, project_id: UUID, owner_id: UUID) -> list[T]:
        response = (
            self.client.table(self.table_name)
            .select(self.columns)
            .eq("project_id", str(project_id))
            .eq(self.owner_column, str(owner_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [self._from_row(row) for row in response.data or []]

    def set_expiry(self, token_id: UUID, expires_at: datetime | None) -> T | None:
        """Conditional on the row not being revoked."""
        return self._update_live(
            token_id, {self.expiry_column: format_timestamp(expires_at)}
        )

    def mark_revoked(self, token_id: UUID, revoked_at: datetime) -> T | None:
        """Conditional on the row not being revoked, so revoked_at is set once."""
        return self._update_live(
            token_id,
            {"is_revoked": True, "revoked_at": format_timestamp(revoked_at)},
        )

    def _update_live(self, token_id: UUID, payload: dict[str, object]) -> T | None:
        response = (
            self.client.table(self.table_name)
            .update(payload)
            .eq("id", str(token_id))
            .eq("is_revoked", False)
            .execute()
        )
        if not response.data:
            return None
        return self._from_row(response.data[0])

    @abstractmethod
    def _to_row(self, token: T) -> dict[str, object]:
        """Convert a token into a table row."""

    @abstractmethod
    def _from_row(self, row: dict[str, object]) -> T:
        """Build a token from a table row."""
