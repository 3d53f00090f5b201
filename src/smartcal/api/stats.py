"""Aggregate statistics endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request

from smartcal.api.dependencies import current_user, get_container
from smartcal.api.schemas import serialize_daily_stat, serialize_weekly_stat
from smartcal.domain.users import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from smartcal.containers import AppContainer

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/daily")
async def daily_stats(
    request: Request,
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    user: UserRecord = Depends(current_user),
) -> dict[str, object]:
    """Return precomputed daily totals, newest first."""
    container: AppContainer = get_container(request)
    stats = container.stats_service.get_daily(user.id, start_date, end_date)
    return {"stats": [serialize_daily_stat(stat) for stat in stats]}


@router.get("/weekly")
async def weekly_stats(
    request: Request,
    start_week: date | None = Query(default=None, alias="startWeek"),
    end_week: date | None = Query(default=None, alias="endWeek"),
    user: UserRecord = Depends(current_user),
) -> dict[str, object]:
    """Return precomputed weekly totals, newest first."""
    container: AppContainer = get_container(request)
    stats = container.stats_service.get_weekly(user.id, start_week, end_week)
    return {"stats": [serialize_weekly_stat(stat) for stat in stats]}


@router.post("/update")
async def update_stats(
    request: Request, user: UserRecord = Depends(current_user)
) -> dict[str, object]:
    """Recompute the caller's recent daily and weekly rows."""
    container: AppContainer = get_container(request)
    result = container.stats_service.refresh(user_id=user.id)
    return {
        "message": "Stats updated successfully",
        "dailyRows": result.daily_rows,
        "weeklyRows": result.weekly_rows,
    }
