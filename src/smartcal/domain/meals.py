"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID

from smartcal.domain.nutrition import FoodItem


class MealType(str, Enum):
    """Meal slot of a log entry."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"


@dataclass(frozen=True)
class MealLogDraft:
    """Caller-supplied data for a new meal log."""

    date: date
    meal_type: MealType
    food_items: list[FoodItem]
    total_calories: float | None = None
    image_url: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class MealLog:
    """A persisted meal log."""

    id: UUID
    user_id: UUID
    date: date
    meal_type: MealType
    food_items: list[FoodItem]
    total_calories: float
    image_url: str | None
    notes: str | None
    timestamp: datetime


def to_calendar_date(value: object) -> date:
    """Return the calendar day of a date, datetime or ISO string.

    ISO datetimes are truncated to their date portion, never shifted.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Not a calendar date: {value!r}")
