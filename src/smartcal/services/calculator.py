"""Quantity-aware nutrition recalculation for food items being edited.

Quantity and nutrition are updated in two separate steps. ``set_quantity``
changes only the quantity; ``recalculate_nutrition`` changes only the
nutrition values and always hands back the quantity it was given.
"""

import math
from dataclasses import replace

from smartcal.domain.nutrition import (
    NUTRIENT_FIELDS,
    EditableFoodItem,
    FoodItem,
    NutrientRates,
)
from smartcal.services.food_table import DEFAULT_WEIGHT_G, estimate_quantity
from smartcal.services.numbers import round_half_up, to_quantity


def rate_unit(is_count_based: bool) -> float:
    """Return the quantity a rate is expressed against."""
    return 1.0 if is_count_based else 100.0


def derive_rates(
    item: FoodItem, baseline_quantity: float, is_count_based: bool
) -> NutrientRates | None:
    """Normalize nutrition known at ``baseline_quantity`` to a per-unit rate."""
    if baseline_quantity <= 0:
        return None
    factor = rate_unit(is_count_based) / baseline_quantity
    return NutrientRates(
        calories=item.calories * factor,
        protein=item.protein * factor,
        carbs=item.carbs * factor,
        fat=item.fat * factor,
    )


def start_editing(item: FoodItem) -> EditableFoodItem:
    """Attach an estimated quantity and its rates to a stored food item."""
    estimate = estimate_quantity(item.name, item.calories)
    return EditableFoodItem(
        item=item,
        quantity=estimate.quantity,
        original_quantity=estimate.quantity,
        is_count_based=estimate.is_count_based,
        rates=derive_rates(item, estimate.quantity, estimate.is_count_based),
    )


def set_quantity(editable: EditableFoodItem, quantity: float) -> EditableFoodItem:
    """Return the item with a new quantity and untouched nutrition."""
    return replace(editable, quantity=quantity)


def recalculate_nutrition(
    editable: EditableFoodItem, new_quantity: object
) -> EditableFoodItem:
    """Scale nutrition to ``new_quantity`` using the item's cached rates.

    Non-numeric or non-positive quantities leave the item as it is.
    """
    quantity = to_quantity(new_quantity)
    if quantity is None or quantity <= 0:
        return editable

    rates = editable.rates
    if rates is None:
        rates = derive_rates(
            editable.item, _baseline_quantity(editable), editable.is_count_based
        )
        if rates is None:
            return editable

    unit = rate_unit(editable.is_count_based)
    scaled = FoodItem(
        name=editable.item.name,
        calories=round_half_up(rates.calories * quantity / unit),
        protein=round_half_up(rates.protein * quantity / unit, 1),
        carbs=round_half_up(rates.carbs * quantity / unit, 1),
        fat=round_half_up(rates.fat * quantity / unit, 1),
    )
    return replace(editable, item=scaled, rates=rates)


def commit_quantity(editable: EditableFoodItem, raw_value: object) -> EditableFoodItem:
    """Apply a finished quantity entry.

    Valid entries are floored to whole grams or pieces and nutrition follows;
    anything else keeps the last committed quantity and its nutrition.
    """
    quantity = to_quantity(raw_value)
    if quantity is not None:
        quantity = float(math.floor(quantity))
    if quantity is None or quantity <= 0:
        if editable.quantity > 0:
            return editable
        restored = editable.original_quantity or DEFAULT_WEIGHT_G
        return set_quantity(recalculate_nutrition(editable, restored), restored)
    updated = recalculate_nutrition(set_quantity(editable, quantity), quantity)
    return set_quantity(updated, quantity)


def edit_nutrient(
    editable: EditableFoodItem, field: str, value: object
) -> EditableFoodItem:
    """Set one nutrient by hand and redefine the baseline at the current quantity."""
    if field not in NUTRIENT_FIELDS:
        raise ValueError(f"Unknown nutrient field: {field}")
    amount = to_quantity(value)
    item = replace(editable.item, **{field: max(amount or 0.0, 0.0)})
    quantity = _current_quantity(editable)
    return replace(
        editable,
        item=item,
        original_quantity=quantity,
        rates=derive_rates(item, quantity, editable.is_count_based),
    )


def replace_nutrition(editable: EditableFoodItem, item: FoodItem) -> EditableFoodItem:
    """Swap in nutrition from elsewhere, such as a fresh text parse.

    The cached rates described the old values, so they are dropped and the new
    values become the baseline at the current quantity.
    """
    return replace(
        editable,
        item=item,
        original_quantity=_current_quantity(editable),
        rates=None,
    )


def to_food_item(editable: EditableFoodItem) -> FoodItem:
    """Strip the editing fields, leaving the stored shape."""
    return editable.item


def _current_quantity(editable: EditableFoodItem) -> float:
    if editable.quantity > 0:
        return editable.quantity
    return _baseline_quantity(editable)


def _baseline_quantity(editable: EditableFoodItem) -> float:
    for candidate in (editable.original_quantity, editable.quantity):
        if candidate > 0:
            return candidate
    return DEFAULT_WEIGHT_G
