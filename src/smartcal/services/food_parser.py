"""Keyword-based meal text parser used when no AI estimate is available."""

import re

from smartcal.domain.nutrition import FoodItem, FoodProfile
from smartcal.services.food_table import FOOD_TABLE, match_food
from smartcal.services.numbers import round_half_up

# Checked in this order; the first one present decides the split.
SEPARATORS = (" and ", " & ", " with ", " plus ", ", ")

GENERIC_KCAL_PER_G = 2.0
GENERIC_PROTEIN_PER_G = 0.2
GENERIC_CARBS_PER_G = 0.3
GENERIC_FAT_PER_G = 0.05

PLACEHOLDER_CALORIES = 200.0
PLACEHOLDER_PROTEIN = 10.0
PLACEHOLDER_CARBS = 20.0
PLACEHOLDER_FAT = 8.0

_LEADING_PHRASE = re.compile(r"^i\s+(?:had|ate|consumed|drank)\s+", re.IGNORECASE)
_GRAMS = re.compile(r"(\d+(?:\.\d+)?)\s*(?:grams?|g)\b(?:\s*of\b)?", re.IGNORECASE)
_LEADING_COUNT = re.compile(r"^\s*(\d+)\b")


def parse_meal_text(
    text: str, table: tuple[FoodProfile, ...] = FOOD_TABLE
) -> list[FoodItem]:
    """Parse a free-text meal description into one item per segment."""
    return [parse_food_segment(segment, table) for segment in split_meal_text(text)]


def split_meal_text(text: str) -> list[str]:
    """Drop a leading "I had ..." phrase and split on the first separator found."""
    cleaned = _LEADING_PHRASE.sub("", text.strip(), count=1).strip()
    lowered = cleaned.lower()
    for separator in SEPARATORS:
        if separator not in lowered:
            continue
        parts = [
            part.strip()
            for part in re.split(re.escape(separator), cleaned, flags=re.IGNORECASE)
        ]
        parts = [part for part in parts if part]
        if parts:
            return parts
        break
    return [cleaned]


def parse_food_segment(
    text: str, table: tuple[FoodProfile, ...] = FOOD_TABLE
) -> FoodItem:
    """Estimate nutrition for a single food description."""
    profile = match_food(text, table)
    grams_match = _GRAMS.search(text)
    if profile is None:
        if grams_match:
            return _generic_estimate(text, float(grams_match.group(1)))
        return FoodItem(
            name=text.strip(),
            calories=PLACEHOLDER_CALORIES,
            protein=PLACEHOLDER_PROTEIN,
            carbs=PLACEHOLDER_CARBS,
            fat=PLACEHOLDER_FAT,
        )

    count_match = _LEADING_COUNT.match(text)
    if grams_match:
        grams = float(grams_match.group(1))
        if profile.is_count_based and profile.serving_size_g:
            multiplier = grams / profile.serving_size_g
        else:
            multiplier = grams / 100
        name = f"{profile.name} {_format_number(grams)}g"
    elif count_match:
        count = int(count_match.group(1))
        multiplier = float(count)
        if profile.is_count_based:
            label = profile.name if count == 1 else (profile.plural or profile.name)
            name = f"{count} {label}"
        else:
            name = f"{profile.name} {_format_number(count * 100)}g"
    else:
        multiplier = 1.0
        name = profile.name

    return FoodItem(
        name=name,
        calories=round_half_up(profile.calories * multiplier, 1),
        protein=round_half_up(profile.protein * multiplier, 1),
        carbs=round_half_up(profile.carbs * multiplier, 1),
        fat=round_half_up(profile.fat * multiplier, 1),
    )


def _generic_estimate(text: str, grams: float) -> FoodItem:
    return FoodItem(
        name=text.strip(),
        calories=round_half_up(grams * GENERIC_KCAL_PER_G),
        protein=round_half_up(grams * GENERIC_PROTEIN_PER_G),
        carbs=round_half_up(grams * GENERIC_CARBS_PER_G),
        fat=round_half_up(grams * GENERIC_FAT_PER_G),
    )


def _format_number(value: float) -> str:
    return f"{value:g}"
