"""Token verification against the identity provider."""

from dataclasses import dataclass
from typing import Protocol

from protein_tracker.domain.models import Principal


class AuthenticationError(Exception):
    """Raised when a bearer token cannot be verified."""


class IdentityProvider(Protocol):
    """Interface for the external identity provider."""

    def verify(self, token: str) -> Principal | None:
        """Return the principal for a valid access token."""


@dataclass
class AuthService:
    """Service that turns access tokens into principals."""

    provider: IdentityProvider

    def authenticate(self, token: str | None) -> Principal:
        """Return the principal for ``token`` or raise AuthenticationError."""
        if not token:
            raise AuthenticationError("Missing access token")
        principal = self.provider.verify(token)
        if principal is None:
            raise AuthenticationError("Invalid or expired access token")
        return principal
