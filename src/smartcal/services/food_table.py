"""Built-in food table and keyword classifier.

The table is an ordered list of records. Lookups pick the longest keyword
contained in the text, so "chicken breast" beats "chicken"; among keywords of
equal length the one listed first wins.
"""

from dataclasses import dataclass

from smartcal.domain.nutrition import Basis, FoodProfile
from smartcal.services.numbers import round_half_up

DEFAULT_WEIGHT_G = 100.0
DEFAULT_COUNT = 1.0

FOOD_TABLE: tuple[FoodProfile, ...] = (
    FoodProfile(
        keyword="egg",
        name="Egg",
        plural="Eggs",
        calories=70,
        protein=6,
        carbs=0.6,
        fat=5,
        basis=Basis.PER_SERVING,
        serving_size_g=50,
    ),
    FoodProfile(
        keyword="eggs",
        name="Egg",
        plural="Eggs",
        calories=70,
        protein=6,
        carbs=0.6,
        fat=5,
        basis=Basis.PER_SERVING,
        serving_size_g=50,
    ),
    FoodProfile(
        keyword="chicken",
        name="Chicken",
        calories=165,
        protein=31,
        carbs=0,
        fat=3.6,
    ),
    FoodProfile(
        keyword="chicken breast",
        name="Chicken breast",
        calories=165,
        protein=31,
        carbs=0,
        fat=3.6,
    ),
    FoodProfile(
        keyword="rice",
        name="Rice",
        calories=130,
        protein=2.7,
        carbs=28,
        fat=0.3,
    ),
    FoodProfile(
        keyword="white rice",
        name="White rice",
        calories=130,
        protein=2.7,
        carbs=28,
        fat=0.3,
    ),
    FoodProfile(
        keyword="apple",
        name="Apple",
        plural="Apples",
        calories=95,
        protein=0.5,
        carbs=25,
        fat=0.3,
        basis=Basis.PER_SERVING,
        serving_size_g=182,
    ),
    FoodProfile(
        keyword="banana",
        name="Banana",
        plural="Bananas",
        calories=105,
        protein=1.3,
        carbs=27,
        fat=0.4,
        basis=Basis.PER_SERVING,
        serving_size_g=118,
    ),
    FoodProfile(
        keyword="bread",
        name="Bread",
        calories=265,
        protein=9,
        carbs=49,
        fat=3.2,
    ),
    FoodProfile(
        keyword="sandwich",
        name="Sandwich",
        plural="Sandwiches",
        calories=250,
        protein=10,
        carbs=30,
        fat=10,
        basis=Basis.PER_SERVING,
        serving_size_g=100,
    ),
)


@dataclass(frozen=True)
class QuantityEstimate:
    """Advisory starting quantity for editing a food item."""

    quantity: float
    is_count_based: bool
    profile: FoodProfile | None


def match_food(
    text: str, table: tuple[FoodProfile, ...] = FOOD_TABLE
) -> FoodProfile | None:
    """Return the table entry with the longest keyword contained in ``text``."""
    lowered = text.lower()
    best: FoodProfile | None = None
    for profile in table:
        if profile.keyword not in lowered:
            continue
        if best is None or len(profile.keyword) > len(best.keyword):
            best = profile
    return best


def estimate_quantity(
    name: str, calories: float, table: tuple[FoodProfile, ...] = FOOD_TABLE
) -> QuantityEstimate:
    """Classify a food and estimate the quantity its calories correspond to."""
    profile = match_food(name, table)
    if profile is None or profile.calories <= 0:
        return QuantityEstimate(DEFAULT_WEIGHT_G, is_count_based=False, profile=profile)
    if profile.is_count_based:
        count = round_half_up(calories / profile.calories)
        return QuantityEstimate(
            count if count > 0 else DEFAULT_COUNT,
            is_count_based=True,
            profile=profile,
        )
    grams = round_half_up(calories / profile.calories * 100)
    return QuantityEstimate(
        grams if grams > 0 else DEFAULT_WEIGHT_G,
        is_count_based=False,
        profile=profile,
    )
