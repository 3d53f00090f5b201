"""Meal log endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from smartcal.api.dependencies import current_user, get_container
from smartcal.api.schemas import (
    MealLogCreateRequest,
    MealLogUpdateRequest,
    serialize_day_totals,
    serialize_meal_log,
)
from smartcal.domain.meals import MealLogDraft
from smartcal.domain.users import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from smartcal.containers import AppContainer

router = APIRouter(prefix="/api/meals", tags=["meals"])


@router.get("")
async def list_meals(
    request: Request, user: UserRecord = Depends(current_user)
) -> dict[str, object]:
    """Return the caller's meal logs, newest first."""
    container: AppContainer = get_container(request)
    logs = container.meal_log_service.list_meals(user.id)
    return {"logs": [serialize_meal_log(log) for log in logs]}


@router.get("/by-date")
async def list_meals_by_date(
    request: Request,
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    user: UserRecord = Depends(current_user),
) -> dict[str, object]:
    """Return the caller's meal logs within an inclusive date range."""
    container: AppContainer = get_container(request)
    logs = container.meal_log_service.list_meals_by_date(user.id, start_date, end_date)
    return {"logs": [serialize_meal_log(log) for log in logs]}


@router.get("/stats/weekly")
async def recent_week(
    request: Request, user: UserRecord = Depends(current_user)
) -> dict[str, object]:
    """Return per-day totals of the last week computed from the meal logs."""
    container: AppContainer = get_container(request)
    totals = container.stats_service.recent_week(user.id)
    return {"stats": [serialize_day_totals(day) for day in totals]}


@router.get("/{meal_log_id}")
async def get_meal(
    meal_log_id: UUID, request: Request, user: UserRecord = Depends(current_user)
) -> dict[str, object]:
    container: AppContainer = get_container(request)
    log = container.meal_log_service.get_meal(user.id, meal_log_id)
    return {"log": serialize_meal_log(log)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_meal(
    body: MealLogCreateRequest,
    request: Request,
    user: UserRecord = Depends(current_user),
) -> dict[str, object]:
    """Store a new meal log for the caller."""
    container: AppContainer = get_container(request)
    draft = MealLogDraft(
        date=body.date,
        meal_type=body.meal_type,
        food_items=[item.to_domain() for item in body.food_items],
        total_calories=body.total_calories,
        image_url=body.image_url,
        notes=body.notes,
    )
    log = container.meal_log_service.create_meal(user.id, draft)
    return {"log": serialize_meal_log(log)}


@router.put("/{meal_log_id}")
async def update_meal(
    meal_log_id: UUID,
    body: MealLogUpdateRequest,
    request: Request,
    user: UserRecord = Depends(current_user),
) -> dict[str, object]:
    """Apply a partial update to one of the caller's meal logs."""
    container: AppContainer = get_container(request)
    log = container.meal_log_service.update_meal(
        user.id, meal_log_id, body.to_changes()
    )
    return {"log": serialize_meal_log(log)}


@router.delete("/{meal_log_id}")
async def delete_meal(
    meal_log_id: UUID, request: Request, user: UserRecord = Depends(current_user)
) -> dict[str, str]:
    container: AppContainer = get_container(request)
    container.meal_log_service.delete_meal(user.id, meal_log_id)
    return {"message": "Meal log deleted successfully"}
