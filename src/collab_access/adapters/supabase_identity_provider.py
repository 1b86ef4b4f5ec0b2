"""Owner identity resolution through Supabase Auth."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client

from collab_access.services.identity import IdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Checks access tokens against Supabase Auth."""

    client: Client

    def get_user_id(self, access_token: str) -> UUID | None:
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as exc:
            logger.info("Rejected owner token: %s", exc.message)
            return None
        if response is None or response.user is None:
            return None
        return UUID(response.user.id)
