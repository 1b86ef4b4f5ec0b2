"""Owner identity interface."""

from typing import Protocol
from uuid import UUID


class IdentityProvider(Protocol):
    """Resolves an owner's bearer token to a user id."""

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the authenticated user id, or None for a bad token."""
