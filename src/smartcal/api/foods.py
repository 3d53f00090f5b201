"""Nutrition estimate endpoints."""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from smartcal.api.dependencies import current_user, get_container
from smartcal.api.schemas import AnalyzeImageRequest, ParseFoodRequest
from smartcal.domain.errors import ValidationFailedError
from smartcal.domain.users import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from smartcal.containers import AppContainer

router = APIRouter(prefix="/api", tags=["foods"])


@router.post("/foods/parse")
async def parse_food(
    body: ParseFoodRequest,
    request: Request,
    user: UserRecord = Depends(current_user),  # noqa: ARG001
) -> dict[str, object]:
    """Turn a free-text meal description into food items."""
    container: AppContainer = get_container(request)
    items = await container.estimation_service.parse_food_text(body.text)
    return {"items": [item.to_dict() for item in items]}


@router.post("/foods/analyze-image")
async def analyze_image(
    body: AnalyzeImageRequest,
    request: Request,
    user: UserRecord = Depends(current_user),  # noqa: ARG001
) -> dict[str, object]:
    """Estimate the food in a base64-encoded photo."""
    container: AppContainer = get_container(request)
    estimate = await container.estimation_service.analyze_image(
        decode_image(body.image)
    )
    return estimate.model_dump()


@router.post("/insights")
async def insights(
    request: Request, user: UserRecord = Depends(current_user)
) -> dict[str, str]:
    """Return a short dietary tip based on the caller's recent meals."""
    container: AppContainer = get_container(request)
    logs = container.meal_log_service.list_meals(user.id)
    insight = await container.estimation_service.dietary_insight(logs)
    return {"insight": insight}


def decode_image(data: str) -> bytes:
    """Decode base64 image data, with or without a ``data:`` URL header."""
    payload = data.split(",", 1)[1] if data.startswith("data:") else data
    try:
        image_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationFailedError("Invalid image data") from exc
    if not image_bytes:
        raise ValidationFailedError("Invalid image data")
    return image_bytes
