"""Supabase repository for meal logs."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import Enum
from uuid import UUID

from supabase import Client

from smartcal.domain.meals import MealLog, MealLogDraft, MealType, to_calendar_date
from smartcal.domain.nutrition import FoodItem
from smartcal.services.meals import MealLogRepository

MEAL_LOG_COLUMNS = (
    "id, user_id, date, meal_type, food_items, total_calories, image_url, notes, "
    "timestamp"
)


@dataclass
class SupabaseMealLogRepository(MealLogRepository):
    """Supabase implementation for meal logs."""

    client: Client

    def create_meal_log(
        self,
        user_id: UUID,
        draft: MealLogDraft,
        total_calories: float,
        timestamp: datetime,
    ) -> MealLog:
        """Insert a meal log row and return it."""
        response = (
            self.client.table("meal_logs")
            .insert(
                {
                    "user_id": str(user_id),
                    "date": draft.date.isoformat(),
                    "meal_type": draft.meal_type.value,
                    "food_items": [item.to_dict() for item in draft.food_items],
                    "total_calories": total_calories,
                    "image_url": draft.image_url,
                    "notes": draft.notes,
                    "timestamp": to_epoch_ms(timestamp),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal log")
        return parse_meal_log(response.data[0])

    def list_meal_logs(
        self, user_id: UUID, start: date | None = None, end: date | None = None
    ) -> list[MealLog]:
        """Return a user's meal logs, newest first."""
        query = (
            self.client.table("meal_logs")
            .select(MEAL_LOG_COLUMNS)
            .eq("user_id", str(user_id))
        )
        if start:
            query = query.gte("date", start.isoformat())
        if end:
            query = query.lte("date", end.isoformat())
        response = query.order("timestamp", desc=True).execute()
        return [parse_meal_log(row) for row in response.data or []]

    def get_meal_log(self, user_id: UUID, meal_log_id: UUID) -> MealLog | None:
        """Return a meal log owned by the user."""
        response = (
            self.client.table("meal_logs")
            .select(MEAL_LOG_COLUMNS)
            .eq("id", str(meal_log_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_meal_log(response.data[0])

    def update_meal_log(
        self, user_id: UUID, meal_log_id: UUID, changes: dict[str, object]
    ) -> MealLog | None:
        """Update a meal log owned by the user and return the new row."""
        response = (
            self.client.table("meal_logs")
            .update(_serialize_changes(changes))
            .eq("id", str(meal_log_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return parse_meal_log(response.data[0])

    def delete_meal_log(self, user_id: UUID, meal_log_id: UUID) -> bool:
        """Delete a meal log owned by the user."""
        response = (
            self.client.table("meal_logs")
            .delete()
            .eq("id", str(meal_log_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def parse_meal_log(row: dict[str, object]) -> MealLog:
    """Build a meal log from a ``meal_logs`` row."""
    raw_items = row.get("food_items") or []
    return MealLog(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        date=to_calendar_date(row["date"]),
        meal_type=MealType(row["meal_type"]),
        food_items=[_parse_food_item(item) for item in raw_items],
        total_calories=float(row.get("total_calories") or 0.0),
        image_url=row.get("image_url"),
        notes=row.get("notes"),
        timestamp=from_epoch_ms(row.get("timestamp")),
    )


def to_epoch_ms(value: datetime) -> int:
    """Return milliseconds since the Unix epoch."""
    return int(value.timestamp() * 1000)


def from_epoch_ms(value: object) -> datetime:
    """Parse a stored epoch-milliseconds value."""
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    if isinstance(value, str) and value.isdigit():
        return datetime.fromtimestamp(int(value) / 1000, tz=UTC)
    return datetime.fromtimestamp(0, tz=UTC)


def _parse_food_item(raw: dict[str, object]) -> FoodItem:
    return FoodItem(
        name=str(raw.get("name", "")),
        calories=float(raw.get("calories") or 0.0),
        protein=float(raw.get("protein") or 0.0),
        carbs=float(raw.get("carbs") or 0.0),
        fat=float(raw.get("fat") or 0.0),
    )


def _serialize_changes(changes: dict[str, object]) -> dict[str, object]:
    payload: dict[str, object] = {}
    for key, value in changes.items():
        if key == "food_items" and isinstance(value, list):
            payload[key] = [item.to_dict() for item in value]
        elif isinstance(value, date):
            payload[key] = value.isoformat()
        elif isinstance(value, Enum):
            payload[key] = value.value
        else:
            payload[key] = value
    return payload
