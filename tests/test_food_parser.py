"""Tests for the keyword meal text parser."""

import pytest

from smartcal.services.food_parser import (
    parse_food_segment,
    parse_meal_text,
    split_meal_text,
)


def test_two_foods_scale_independently() -> None:
    items = parse_meal_text("100g chicken and 100g rice")

    assert [item.name for item in items] == ["Chicken 100g", "Rice 100g"]
    assert items[0].calories == 165
    assert items[0].protein == pytest.approx(31)
    assert items[1].calories == 130
    assert items[1].carbs == pytest.approx(28)


def test_counted_eggs() -> None:
    items = parse_meal_text("2 eggs")

    assert len(items) == 1
    assert items[0].name == "2 Eggs"
    assert items[0].calories == pytest.approx(140)
    assert items[0].protein == pytest.approx(12)
    assert items[0].carbs == pytest.approx(1.2)
    assert items[0].fat == pytest.approx(10)


def test_single_count_uses_singular_name() -> None:
    assert parse_food_segment("1 banana").name == "1 Banana"


def test_unrecognized_text_gets_placeholder() -> None:
    items = parse_meal_text("I had a bowl of soup")

    assert len(items) == 1
    item = items[0]
    assert item.name == "a bowl of soup"
    assert (item.calories, item.protein, item.carbs, item.fat) == (200, 10, 20, 8)


def test_unknown_food_with_grams_uses_generic_rates() -> None:
    item = parse_food_segment("250g mystery meat")

    assert item.name == "250g mystery meat"
    assert (item.calories, item.protein, item.carbs, item.fat) == (500, 50, 75, 13)


def test_leading_phrase_and_comma_split() -> None:
    items = parse_meal_text("I ate 2 apples, 1 banana")

    assert [item.name for item in items] == ["2 Apples", "1 Banana"]
    assert items[0].calories == 190
    assert items[1].calories == 105


def test_split_is_case_insensitive() -> None:
    assert split_meal_text("Chicken With Rice") == ["Chicken", "Rice"]


def test_only_first_separator_splits() -> None:
    items = parse_meal_text("rice and beans, chicken")

    assert len(items) == 2
    assert items[0].name == "Rice"
    assert items[1].name == "Chicken"


def test_grams_of_count_based_food_use_serving_size() -> None:
    item = parse_food_segment("150 grams of eggs")

    assert item.name == "Egg 150g"
    assert item.calories == 210


def test_count_of_weight_based_food_means_hundreds_of_grams() -> None:
    item = parse_food_segment("2 bread")

    assert item.name == "Bread 200g"
    assert item.calories == 530
    assert item.protein == 18


def test_plain_food_name_uses_one_unit() -> None:
    item = parse_food_segment("banana")

    assert item.name == "Banana"
    assert item.calories == 105
