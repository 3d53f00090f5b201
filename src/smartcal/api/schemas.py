"""Request models and response serializers for the REST API."""

import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from smartcal.adapters.supabase_meal_log_repository import to_epoch_ms
from smartcal.domain.meals import MealLog, MealType, to_calendar_date
from smartcal.domain.nutrition import FoodItem
from smartcal.domain.stats import DailyStat, DayTotals, WeeklyStat
from smartcal.domain.users import UserRecord

_NULLABLE_FIELDS = frozenset({"image_url", "notes"})


class CamelModel(BaseModel):
    """Base model accepting camelCase or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FoodItemPayload(CamelModel):
    """Food item as exchanged over the wire; extra keys are dropped."""

    name: str
    calories: float = Field(ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)

    def to_domain(self) -> FoodItem:
        return FoodItem(
            name=self.name,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
        )


class SignupRequest(CamelModel):
    username: str
    email: str
    password: str
    daily_calorie_target: int | None = None


class LoginRequest(CamelModel):
    username: str
    password: str


class ProfileUpdateRequest(CamelModel):
    username: str | None = None
    email: str | None = None
    daily_calorie_target: int | None = None


class MealLogCreateRequest(CamelModel):
    """Body of ``POST /api/meals``."""

    date: datetime.date
    meal_type: MealType
    food_items: list[FoodItemPayload]
    total_calories: float | None = None
    image_url: str | None = None
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _truncate_date(cls, value: object) -> datetime.date:
        return to_calendar_date(value)


class MealLogUpdateRequest(CamelModel):
    """Body of ``PUT /api/meals/{id}``; only the keys sent are applied."""

    date: datetime.date | None = None
    meal_type: MealType | None = None
    food_items: list[FoodItemPayload] | None = None
    total_calories: float | None = None
    image_url: str | None = None
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _truncate_date(cls, value: object) -> datetime.date | None:
        if value is None:
            return None
        return to_calendar_date(value)

    def to_changes(self) -> dict[str, object]:
        """Return the fields that were sent, keyed by column name."""
        changes = {
            key: getattr(self, key)
            for key in self.model_fields_set
            if getattr(self, key) is not None or key in _NULLABLE_FIELDS
        }
        if self.food_items is not None and "food_items" in changes:
            changes["food_items"] = [item.to_domain() for item in self.food_items]
        return changes


class ParseFoodRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(min_length=1)


class AnalyzeImageRequest(CamelModel):
    image: str = Field(min_length=1)


def serialize_user(user: UserRecord) -> dict[str, object]:
    return {
        "id": str(user.id),
        "username": user.username,
        "email": user.email,
        "role": user.role.value,
        "dailyCalorieTarget": user.daily_calorie_target,
    }


def serialize_meal_log(log: MealLog) -> dict[str, object]:
    return {
        "id": str(log.id),
        "userId": str(log.user_id),
        "date": log.date.isoformat(),
        "mealType": log.meal_type.value,
        "foodItems": [item.to_dict() for item in log.food_items],
        "totalCalories": log.total_calories,
        "imageUrl": log.image_url,
        "notes": log.notes,
        "timestamp": to_epoch_ms(log.timestamp),
    }


def serialize_daily_stat(stat: DailyStat) -> dict[str, object]:
    return {
        "userId": str(stat.user_id),
        "date": stat.date.isoformat(),
        "totalCalories": stat.total_calories,
        "totalProtein": stat.total_protein,
        "totalCarbs": stat.total_carbs,
        "totalFat": stat.total_fat,
        "mealCount": stat.meal_count,
    }


def serialize_weekly_stat(stat: WeeklyStat) -> dict[str, object]:
    return {
        "userId": str(stat.user_id),
        "weekStartDate": stat.week_start_date.isoformat(),
        "weekEndDate": stat.week_end_date.isoformat(),
        "totalCalories": stat.total_calories,
        "avgDailyCalories": stat.avg_daily_calories,
        "totalProtein": stat.total_protein,
        "totalCarbs": stat.total_carbs,
        "totalFat": stat.total_fat,
        "mealCount": stat.meal_count,
    }


def serialize_day_totals(totals: DayTotals) -> dict[str, object]:
    return {
        "date": totals.date.isoformat(),
        "calories": totals.calories,
        "protein": totals.protein,
        "carbs": totals.carbs,
        "fat": totals.fat,
    }
