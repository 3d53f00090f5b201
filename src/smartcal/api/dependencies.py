"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request

from smartcal.domain.errors import AuthenticationError
from smartcal.domain.users import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from smartcal.containers import AppContainer


def get_container(request: Request) -> AppContainer:
    """Return the dependency container attached to the app."""
    return request.app.state.container


async def current_user(
    request: Request, authorization: str | None = Header(default=None)
) -> UserRecord:
    """Resolve the bearer token of the request to a user."""
    container = get_container(request)
    return container.auth_service.authenticate(bearer_token(authorization))


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        raise AuthenticationError("Invalid token")
    return token.strip() or None
