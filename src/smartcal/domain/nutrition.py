"""Nutrition domain models."""

from dataclasses import dataclass
from enum import Enum

NUTRIENT_FIELDS = ("calories", "protein", "carbs", "fat")


@dataclass(frozen=True)
class FoodItem:
    """A food entry as it is stored inside a meal log."""

    name: str
    calories: float
    protein: float
    carbs: float
    fat: float

    def to_dict(self) -> dict[str, object]:
        """Return the persisted JSON shape."""
        return {
            "name": self.name,
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }


@dataclass(frozen=True)
class NutrientRates:
    """Nutrition per 100 g, or per piece for count-based foods."""

    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class EditableFoodItem:
    """A food item carrying the transient fields used while editing a meal.

    ``quantity`` is grams for weight-based foods and pieces for count-based
    foods. ``original_quantity`` is the quantity at which the nutrition values
    were last known to be correct. ``rates`` is filled lazily the first time
    nutrition is recomputed and then reused, so repeated edits never derive a
    rate from already-scaled values.
    """

    item: FoodItem
    quantity: float
    original_quantity: float
    is_count_based: bool = False
    rates: NutrientRates | None = None


class Basis(str, Enum):
    """How the base nutrition of a table entry is expressed."""

    PER_100G = "per100g"
    PER_SERVING = "perServing"


@dataclass(frozen=True)
class FoodProfile:
    """Row of the built-in food table."""

    keyword: str
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    basis: Basis = Basis.PER_100G
    serving_size_g: float | None = None
    plural: str | None = None

    @property
    def is_count_based(self) -> bool:
        """Return True when the natural unit of the food is one piece."""
        return self.basis is Basis.PER_SERVING and bool(self.serving_size_g)
