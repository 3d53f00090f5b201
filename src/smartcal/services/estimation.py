"""Nutrition estimates from meal text and photos, with offline fallbacks."""

import base64
import json
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from smartcal.domain.estimates import FoodTextEstimate, ImageEstimate
from smartcal.domain.meals import MealLog
from smartcal.domain.nutrition import FoodItem
from smartcal.services.food_parser import parse_meal_text
from smartcal.services.numbers import round_half_up

_logger = logging.getLogger(__name__)

INSIGHT_CONTEXT_LOGS = 5
HIGH_CALORIES_PER_MEAL = 2500
LOW_PROTEIN_PER_MEAL = 20

_FOOD_PROPERTIES: dict[str, object] = {
    "name": {"type": "string"},
    "calories": {"type": "number", "minimum": 0},
    "protein": {"type": "number", "minimum": 0},
    "carbs": {"type": "number", "minimum": 0},
    "fat": {"type": "number", "minimum": 0},
}

FOOD_TEXT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": _FOOD_PROPERTIES,
                "required": ["name", "calories", "protein", "carbs", "fat"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

IMAGE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        **_FOOD_PROPERTIES,
        "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
    },
    "required": ["name", "calories", "protein", "carbs", "fat", "confidence"],
    "additionalProperties": False,
}


class EstimationClient(Protocol):
    """Interface for language model calls."""

    async def complete_json(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return structured output matching ``schema``."""

    async def complete_text(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        """Return a free-text answer."""


@dataclass
class EstimationService:
    """Service that estimates nutrition, falling back when no model is usable."""

    client: EstimationClient | None
    model: str
    reasoning_effort: str | None = None
    store: bool = False

    async def parse_food_text(self, text: str) -> list[FoodItem]:
        """Split a meal description into food items with nutrition."""
        if self.client is None:
            return parse_meal_text(text)
        prompt = (
            f'Extract nutritional information from this text: "{text}". '
            "Return one entry per food item mentioned, each with name, calories, "
            "protein, carbs and fat for the portion described."
        )
        try:
            raw = await self.client.complete_json(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema_name="food_text_estimate",
                schema=FOOD_TEXT_SCHEMA,
            )
            estimate = FoodTextEstimate.model_validate(raw)
        except ValidationError:
            _logger.warning("Model returned malformed food items, using keyword parser")
            return parse_meal_text(text)
        except Exception:
            _logger.exception("Food text estimate failed, using keyword parser")
            return parse_meal_text(text)
        return [FoodItem(**item.model_dump()) for item in estimate.items]

    async def analyze_image(self, image_bytes: bytes) -> ImageEstimate:
        """Estimate the food and portion shown in a photo."""
        if self.client is None:
            return _unrecognized_image(
                "Please enter nutritional information manually. "
                "API key not configured."
            )
        prompt = (
            "Identify the food in this image. Estimate calories and macros "
            "(protein, carbs, fat) for the portion shown. If there are several "
            "items, sum them up or pick the main one. Include a confidence (0-1)."
        )
        try:
            raw = await self.client.complete_json(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema_name="image_estimate",
                schema=IMAGE_SCHEMA,
                image_data_url=_to_data_url(image_bytes),
            )
            return ImageEstimate.model_validate(raw)
        except Exception:
            _logger.exception("Image analysis failed")
            return _unrecognized_image(
                "Image recognition unavailable. "
                "Please enter nutritional information manually."
            )

    async def dietary_insight(self, recent_logs: list[MealLog]) -> str:
        """Return a short health tip based on recent meal logs."""
        if self.client is None:
            return basic_insight(recent_logs)
        context = json.dumps(
            [_log_context(log) for log in recent_logs[:INSIGHT_CONTEXT_LOGS]]
        )
        prompt = (
            f"Here are my recent food logs: {context}. Give me a 2-sentence "
            "health tip based on this data. Address the user directly."
        )
        try:
            answer = await self.client.complete_text(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
            )
        except Exception:
            _logger.exception("Insight generation failed, using basic insight")
            return basic_insight(recent_logs)
        return answer.strip() or basic_insight(recent_logs)


def basic_insight(recent_logs: list[MealLog]) -> str:
    """Rule-based tip from average calories and protein per meal."""
    if not recent_logs:
        return "Add some meal logs to get personalized insights!"
    meals = len(recent_logs)
    avg_calories = round_half_up(sum(log.total_calories for log in recent_logs) / meals)
    total_protein = sum(
        item.protein for log in recent_logs for item in log.food_items
    )
    avg_protein = round_half_up(total_protein / meals)
    if avg_calories > HIGH_CALORIES_PER_MEAL:
        return (
            f"You're averaging {avg_calories:.0f} calories per meal. Consider "
            "balancing your portions and including more vegetables for better "
            "nutrition."
        )
    if avg_protein < LOW_PROTEIN_PER_MEAL:
        return (
            f"Your average protein intake is {avg_protein:.0f}g per meal. Try "
            "adding lean proteins like chicken, fish, or legumes to support "
            "muscle health."
        )
    return (
        f"Great job tracking your meals! You're averaging {avg_calories:.0f} "
        f"calories with {avg_protein:.0f}g of protein per meal. "
        "Keep up the consistency!"
    )


def _unrecognized_image(note: str) -> ImageEstimate:
    return ImageEstimate(
        name="Food Item",
        calories=0,
        protein=0,
        carbs=0,
        fat=0,
        confidence=0,
        note=note,
    )


def _log_context(log: MealLog) -> dict[str, object]:
    return {
        "date": log.date.isoformat(),
        "mealType": log.meal_type.value,
        "totalCalories": log.total_calories,
        "foodItems": [item.to_dict() for item in log.food_items],
    }


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
