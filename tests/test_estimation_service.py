"""Tests for the nutrition estimation service."""

import asyncio
from datetime import UTC, date, datetime
from uuid import uuid4

from smartcal.domain.meals import MealLog, MealType
from smartcal.services.estimation import EstimationService, basic_insight
from smartcal.services.food_parser import parse_meal_text
from tests.conftest import FakeEstimationClient, food


def _log(total_calories: float, protein: float) -> MealLog:
    return MealLog(
        id=uuid4(),
        user_id=uuid4(),
        date=date(2024, 5, 6),
        meal_type=MealType.DINNER,
        food_items=[food("Plate", total_calories, protein=protein)],
        total_calories=total_calories,
        image_url=None,
        notes=None,
        timestamp=datetime(2024, 5, 6, 19, tzinfo=UTC),
    )


def test_parse_without_client_uses_keyword_parser() -> None:
    service = EstimationService(client=None, model="gpt-5.2")

    items = asyncio.run(service.parse_food_text("2 eggs"))

    assert items == parse_meal_text("2 eggs")


def test_parse_with_client_returns_model_items() -> None:
    client = FakeEstimationClient()
    service = EstimationService(client=client, model="gpt-5.2")

    items = asyncio.run(service.parse_food_text("salmon fillet"))

    assert [item.name for item in items] == ["Grilled salmon"]
    assert items[0].calories == 367
    assert client.calls[0]["schema_name"] == "food_text_estimate"
    assert "salmon fillet" in str(client.calls[0]["prompt"])


def test_parse_falls_back_when_client_raises() -> None:
    client = FakeEstimationClient(error=RuntimeError("quota exceeded"))
    service = EstimationService(client=client, model="gpt-5.2")

    items = asyncio.run(service.parse_food_text("100g chicken and 100g rice"))

    assert [item.calories for item in items] == [165, 130]


def test_parse_falls_back_on_malformed_output() -> None:
    client = FakeEstimationClient(json_payload={"items": []})
    service = EstimationService(client=client, model="gpt-5.2")

    items = asyncio.run(service.parse_food_text("banana"))

    assert [item.name for item in items] == ["Banana"]


def test_analyze_image_without_client_returns_placeholder() -> None:
    service = EstimationService(client=None, model="gpt-5.2")

    estimate = asyncio.run(service.analyze_image(b"\xff\xd8\xffdata"))

    assert estimate.name == "Food Item"
    assert estimate.calories == 0
    assert estimate.note is not None
    assert "API key" in estimate.note


def test_analyze_image_sends_data_url() -> None:
    client = FakeEstimationClient(
        json_payload={
            "name": "Pancakes",
            "calories": 520,
            "protein": 12,
            "carbs": 80,
            "fat": 16,
            "confidence": 0.8,
        }
    )
    service = EstimationService(client=client, model="gpt-5.2")

    estimate = asyncio.run(service.analyze_image(b"\x89PNG\r\n\x1a\nrest"))

    assert estimate.name == "Pancakes"
    assert estimate.confidence == 0.8
    assert str(client.calls[0]["image"]).startswith("data:image/png;base64,")


def test_analyze_image_failure_returns_placeholder() -> None:
    client = FakeEstimationClient(error=RuntimeError("timeout"))
    service = EstimationService(client=client, model="gpt-5.2")

    estimate = asyncio.run(service.analyze_image(b"bytes"))

    assert estimate.name == "Food Item"
    assert estimate.note is not None
    assert estimate.note.startswith("Image recognition unavailable")


def test_insight_with_client() -> None:
    service = EstimationService(client=FakeEstimationClient(), model="gpt-5.2")

    insight = asyncio.run(service.dietary_insight([_log(600, 30)]))

    assert insight == "Eat more greens. Keep it up."


def test_insight_falls_back_when_client_fails() -> None:
    client = FakeEstimationClient(error=RuntimeError("down"))
    service = EstimationService(client=client, model="gpt-5.2")

    insight = asyncio.run(service.dietary_insight([]))

    assert insight == "Add some meal logs to get personalized insights!"


def test_basic_insight_rules() -> None:
    assert "balancing your portions" in basic_insight([_log(3000, 80)])
    assert "lean proteins" in basic_insight([_log(500, 10)])
    encouragement = basic_insight([_log(600, 30), _log(400, 20)])
    assert encouragement.startswith("Great job tracking your meals!")
    assert "500 calories with 25g of protein" in encouragement
