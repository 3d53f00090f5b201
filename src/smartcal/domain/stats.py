"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class DailyStat:
    """Aggregated totals for one user and day."""

    user_id: UUID
    date: date
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    meal_count: int


@dataclass(frozen=True)
class WeeklyStat:
    """Aggregated totals for one user and Monday-start week."""

    user_id: UUID
    week_start_date: date
    week_end_date: date
    total_calories: float
    avg_daily_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    meal_count: int


@dataclass(frozen=True)
class DayTotals:
    """Per-date totals computed directly from meal logs."""

    date: date
    calories: float
    protein: float
    carbs: float
    fat: float
