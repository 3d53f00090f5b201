"""Admin API endpoints, restricted to the ADMIN role."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from smartcal.api.dependencies import current_user, get_container
from smartcal.domain.users import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from smartcal.containers import AppContainer

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/users")
async def list_users(
    request: Request, user: UserRecord = Depends(current_user)
) -> dict[str, object]:
    """Return a list of users with usage summaries."""
    container: AppContainer = get_container(request)
    return {"users": container.admin_service.list_users(user)}


@router.post("/stats/update")
async def refresh_all_stats(
    request: Request, user: UserRecord = Depends(current_user)
) -> dict[str, object]:
    """Recompute recent aggregate rows for every user."""
    container: AppContainer = get_container(request)
    result = container.admin_service.refresh_all_stats(user)
    return {
        "message": "Stats updated successfully",
        "dailyRows": result.daily_rows,
        "weeklyRows": result.weekly_rows,
    }
