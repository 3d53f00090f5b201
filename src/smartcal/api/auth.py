"""Account endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, status

from smartcal.api.dependencies import current_user, get_container
from smartcal.api.schemas import (
    LoginRequest,
    ProfileUpdateRequest,
    SignupRequest,
    serialize_user,
)
from smartcal.domain.users import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from smartcal.containers import AppContainer

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, request: Request) -> dict[str, object]:
    """Create an account and return a token for it."""
    container: AppContainer = get_container(request)
    session = container.auth_service.signup(
        username=body.username,
        email=body.email,
        password=body.password,
        daily_calorie_target=body.daily_calorie_target,
    )
    return {
        "message": "User created successfully",
        "token": session.token,
        "user": serialize_user(session.user),
    }


@router.post("/login")
async def login(body: LoginRequest, request: Request) -> dict[str, object]:
    """Exchange a username or email and password for a token."""
    container: AppContainer = get_container(request)
    session = container.auth_service.login(body.username, body.password)
    return {
        "message": "Login successful",
        "token": session.token,
        "user": serialize_user(session.user),
    }


@router.get("/verify")
async def verify(user: UserRecord = Depends(current_user)) -> dict[str, object]:
    """Return the user the bearer token belongs to."""
    return {"user": serialize_user(user)}


@router.put("/profile")
async def update_profile(
    body: ProfileUpdateRequest,
    request: Request,
    user: UserRecord = Depends(current_user),
) -> dict[str, object]:
    """Change the caller's username, email or daily calorie target."""
    container: AppContainer = get_container(request)
    updated = container.auth_service.update_profile(
        user.id,
        username=body.username,
        email=body.email,
        daily_calorie_target=body.daily_calorie_target,
    )
    return {"message": "Profile updated successfully", "user": serialize_user(updated)}
