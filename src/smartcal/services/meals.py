"""Meal logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from smartcal.domain.errors import NotFoundError, ValidationFailedError
from smartcal.domain.meals import MealLog, MealLogDraft, MealType, to_calendar_date
from smartcal.domain.nutrition import FoodItem

UPDATABLE_FIELDS = frozenset(
    {"date", "meal_type", "food_items", "total_calories", "image_url", "notes"}
)

_logger = logging.getLogger(__name__)


class MealLogRepository(Protocol):
    """Persistence interface for meal logs."""

    def create_meal_log(
        self,
        user_id: UUID,
        draft: MealLogDraft,
        total_calories: float,
        timestamp: datetime,
    ) -> MealLog:
        """Insert a meal log and return the stored row."""

    def list_meal_logs(
        self, user_id: UUID, start: date | None = None, end: date | None = None
    ) -> list[MealLog]:
        """Return a user's meal logs, newest first, optionally within dates."""

    def get_meal_log(self, user_id: UUID, meal_log_id: UUID) -> MealLog | None:
        """Return a meal log owned by the user."""

    def update_meal_log(
        self, user_id: UUID, meal_log_id: UUID, changes: dict[str, object]
    ) -> MealLog | None:
        """Apply changes to a meal log owned by the user and return it."""

    def delete_meal_log(self, user_id: UUID, meal_log_id: UUID) -> bool:
        """Delete a meal log owned by the user; return False when none matched."""


@dataclass
class MealLogService:
    """Service for creating, reading, editing and deleting meal logs."""

    repository: MealLogRepository

    def create_meal(self, user_id: UUID, draft: MealLogDraft) -> MealLog:
        """Persist a new meal log.

        Totals are taken from the caller; only a missing total is filled in
        from the item calories.
        """
        _validate_food_items(draft.food_items)
        total_calories = (
            draft.total_calories
            if draft.total_calories is not None
            else sum_calories(draft.food_items)
        )
        log = self.repository.create_meal_log(
            user_id=user_id,
            draft=draft,
            total_calories=total_calories,
            timestamp=datetime.now(tz=UTC),
        )
        _logger.info("Created meal log %s for user %s", log.id, user_id)
        return log

    def list_meals(self, user_id: UUID) -> list[MealLog]:
        """Return all of a user's meal logs, most recent first."""
        return self.repository.list_meal_logs(user_id)

    def list_meals_by_date(
        self, user_id: UUID, start: date | None, end: date | None
    ) -> list[MealLog]:
        """Return meal logs dated within an inclusive range."""
        return self.repository.list_meal_logs(user_id, start=start, end=end)

    def get_meal(self, user_id: UUID, meal_log_id: UUID) -> MealLog:
        """Return one meal log owned by the user."""
        log = self.repository.get_meal_log(user_id, meal_log_id)
        if log is None:
            raise NotFoundError("Meal log not found")
        return log

    def update_meal(
        self, user_id: UUID, meal_log_id: UUID, changes: dict[str, object]
    ) -> MealLog:
        """Apply a partial update to a meal log owned by the user."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationFailedError(
                f"Unknown meal log fields: {', '.join(sorted(unknown))}"
            )
        normalized = dict(changes)
        try:
            if "date" in normalized:
                normalized["date"] = to_calendar_date(normalized["date"])
            if "meal_type" in normalized:
                normalized["meal_type"] = MealType(normalized["meal_type"])
        except ValueError as exc:
            raise ValidationFailedError(str(exc)) from exc
        if "food_items" in normalized:
            items = normalized["food_items"]
            if not isinstance(items, list):
                raise ValidationFailedError("Invalid meal log data")
            _validate_food_items(items)
        log = self.repository.update_meal_log(user_id, meal_log_id, normalized)
        if log is None:
            raise NotFoundError("Meal log not found")
        return log

    def delete_meal(self, user_id: UUID, meal_log_id: UUID) -> None:
        """Delete a meal log owned by the user."""
        if not self.repository.delete_meal_log(user_id, meal_log_id):
            raise NotFoundError("Meal log not found")
        _logger.info("Deleted meal log %s for user %s", meal_log_id, user_id)


def sum_calories(items: list[FoodItem]) -> float:
    """Total calories of a list of food items."""
    return sum(item.calories for item in items)


def _validate_food_items(items: list[FoodItem]) -> None:
    if not items:
        raise ValidationFailedError("Invalid meal log data")
    if any(not item.name.strip() for item in items):
        raise ValidationFailedError("Please fill in all food items")
