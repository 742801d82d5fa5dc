"""Supabase Auth implementation of the identity provider."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from protein_tracker.domain.models import Principal
from protein_tracker.services.auth import IdentityProvider

logger = logging.getLogger(__name__)


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Verifies access tokens with Supabase Auth."""

    client: Client

    def verify(self, token: str) -> Principal | None:
        """Return the principal for a valid token, None otherwise."""
        try:
            response = self.client.auth.get_user(token)
        except Exception:
            logger.warning("Access token rejected by Supabase Auth", exc_info=True)
            return None
        user = getattr(response, "user", None)
        if user is None:
            return None
        return Principal(id=UUID(str(user.id)), email=getattr(user, "email", None))
