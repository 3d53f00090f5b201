"""Editing state for one meal before it is sent back to the API.

Quantity text typed by the user is kept apart from the items. Nothing is
recalculated while typing; ``commit_quantity`` applies the text once the
entry is finished.
"""

from dataclasses import dataclass, replace
from datetime import date

from smartcal.domain.errors import ValidationFailedError
from smartcal.domain.meals import MealType, to_calendar_date
from smartcal.domain.nutrition import EditableFoodItem, FoodItem, NutrientRates
from smartcal.services import calculator
from smartcal.services.food_table import DEFAULT_WEIGHT_G


@dataclass
class MealEditor:
    """Mutable editing session for a meal log."""

    date: date
    meal_type: MealType
    items: list[EditableFoodItem]
    quantity_inputs: list[str]
    notes: str | None = None
    image_url: str | None = None

    @classmethod
    def from_food_items(
        cls,
        food_items: list[FoodItem],
        meal_date: date,
        meal_type: MealType,
        notes: str | None = None,
        image_url: str | None = None,
    ) -> "MealEditor":
        """Seed editable items with quantities estimated from their names."""
        items = [calculator.start_editing(item) for item in food_items]
        return cls(
            date=meal_date,
            meal_type=meal_type,
            items=items,
            quantity_inputs=[_format_quantity(item.quantity) for item in items],
            notes=notes,
            image_url=image_url,
        )

    @classmethod
    def from_wire(cls, log: dict[str, object]) -> "MealEditor":
        """Build an editor from a meal log as returned by the API."""
        food_items = [
            FoodItem(
                name=str(raw.get("name", "")),
                calories=float(raw.get("calories") or 0.0),
                protein=float(raw.get("protein") or 0.0),
                carbs=float(raw.get("carbs") or 0.0),
                fat=float(raw.get("fat") or 0.0),
            )
            for raw in log.get("foodItems") or []
        ]
        return cls.from_food_items(
            food_items,
            meal_date=to_calendar_date(log["date"]),
            meal_type=MealType(log["mealType"]),
            notes=log.get("notes"),
            image_url=log.get("imageUrl"),
        )

    def type_quantity(self, index: int, text: str) -> None:
        """Record in-progress quantity text without touching the item."""
        self.quantity_inputs[index] = text

    def commit_quantity(self, index: int) -> EditableFoodItem:
        """Apply the typed quantity, or keep the last committed one."""
        updated = calculator.commit_quantity(
            self.items[index], self.quantity_inputs[index]
        )
        self.items[index] = updated
        self.quantity_inputs[index] = _format_quantity(updated.quantity)
        return updated

    def edit_nutrient(self, index: int, field: str, value: object) -> EditableFoodItem:
        self.items[index] = calculator.edit_nutrient(self.items[index], field, value)
        return self.items[index]

    def rename(self, index: int, name: str) -> None:
        editable = self.items[index]
        self.items[index] = replace(editable, item=replace(editable.item, name=name))

    def replace_nutrition(self, index: int, item: FoodItem) -> EditableFoodItem:
        """Take nutrition from a fresh parse; rates are derived again later."""
        self.items[index] = calculator.replace_nutrition(self.items[index], item)
        return self.items[index]

    def add_item(self) -> None:
        self.items.append(
            EditableFoodItem(
                item=FoodItem(name="", calories=0, protein=0, carbs=0, fat=0),
                quantity=DEFAULT_WEIGHT_G,
                original_quantity=DEFAULT_WEIGHT_G,
                is_count_based=False,
                rates=NutrientRates(calories=0, protein=0, carbs=0, fat=0),
            )
        )
        self.quantity_inputs.append(_format_quantity(DEFAULT_WEIGHT_G))

    def remove_item(self, index: int) -> bool:
        """Drop an item unless it is the last one."""
        if len(self.items) <= 1:
            return False
        del self.items[index]
        del self.quantity_inputs[index]
        return True

    @property
    def total_calories(self) -> float:
        return sum(editable.item.calories for editable in self.items)

    def food_items(self) -> list[FoodItem]:
        """Items in their stored shape."""
        return [calculator.to_food_item(editable) for editable in self.items]

    def to_update_payload(self) -> dict[str, object]:
        """Return the wire body for saving the meal."""
        if not self.items or any(not e.item.name.strip() for e in self.items):
            raise ValidationFailedError("Please fill in all food items")
        payload: dict[str, object] = {
            "date": self.date.isoformat(),
            "mealType": self.meal_type.value,
            "foodItems": [item.to_dict() for item in self.food_items()],
            "totalCalories": self.total_calories,
        }
        if self.notes:
            payload["notes"] = self.notes
        if self.image_url:
            payload["imageUrl"] = self.image_url
        return payload


def _format_quantity(quantity: float) -> str:
    return f"{quantity:g}"
