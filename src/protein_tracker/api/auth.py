"""Bearer token authentication for API routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, HTTPException, Request, status

from protein_tracker.domain.models import Principal  # noqa: TC001
from protein_tracker.services.auth import AuthenticationError

if TYPE_CHECKING:
    from protein_tracker.containers import AppContainer


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


async def require_principal(
    request: Request,
    authorization: str | None = Header(default=None),
) -> Principal:
    """Resolve the calling user from the Authorization header."""
    container: AppContainer = request.app.state.container
    try:
        return container.auth_service.authenticate(_bearer_token(authorization))
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
