"""Tests for stats aggregation."""

from datetime import date
from uuid import uuid4

import pytest

from smartcal.domain.stats import DailyStat
from smartcal.services.meals import MealLogService
from smartcal.services.stats import (
    StatsService,
    aggregate_daily,
    aggregate_weekly,
    week_start_of,
)
from tests.conftest import InMemoryStatsRepository, draft, food

TODAY = date(2024, 5, 9)  # Thursday


@pytest.fixture
def meals(meal_log_repository) -> MealLogService:
    return MealLogService(meal_log_repository)


def test_daily_rollup_groups_by_user_and_date(
    meals: MealLogService, stats_repository: InMemoryStatsRepository
) -> None:
    alice, bob = uuid4(), uuid4()
    meals.create_meal(
        alice, draft(date(2024, 5, 6), [food("Rice", 130, protein=2.7, carbs=28)])
    )
    meals.create_meal(
        alice, draft(date(2024, 5, 6), [food("Chicken", 165, protein=31, fat=3.6)])
    )
    meals.create_meal(alice, draft(date(2024, 5, 8), [food("Apple", 95, carbs=25)]))
    meals.create_meal(bob, draft(date(2024, 5, 6), [food("Bread", 265, protein=9)]))

    logs = stats_repository.list_meal_logs_since(date(2024, 5, 1), None)
    daily = aggregate_daily(logs)

    by_key = {(stat.user_id, stat.date): stat for stat in daily}
    monday = by_key[(alice, date(2024, 5, 6))]
    assert monday.total_calories == 295
    assert monday.total_protein == pytest.approx(33.7)
    assert monday.meal_count == 2
    assert by_key[(alice, date(2024, 5, 8))].meal_count == 1
    assert by_key[(bob, date(2024, 5, 6))].total_calories == 265


def test_daily_calories_come_from_log_total(meals: MealLogService) -> None:
    log = meals.create_meal(
        uuid4(), draft(date(2024, 5, 6), [food("Rice", 130)], total_calories=200)
    )

    assert aggregate_daily([log])[0].total_calories == 200


def test_refresh_writes_daily_then_weekly_rows(
    meals: MealLogService, stats_repository: InMemoryStatsRepository
) -> None:
    user_id = uuid4()
    meals.create_meal(user_id, draft(date(2024, 5, 6), [food("Rice", 300)]))
    meals.create_meal(user_id, draft(date(2024, 5, 8), [food("Rice", 500)]))
    meals.create_meal(user_id, draft(date(2024, 4, 20), [food("Old", 900)]))
    service = StatsService(stats_repository)

    result = service.refresh(user_id=user_id, today=TODAY)

    assert result.daily_rows == 2
    assert result.weekly_rows == 1
    weekly = service.get_weekly(user_id)
    assert len(weekly) == 1
    week = weekly[0]
    assert week.week_start_date == date(2024, 5, 6)
    assert week.week_end_date == date(2024, 5, 12)
    assert week.total_calories == 800
    assert week.avg_daily_calories == 400
    assert week.meal_count == 2
    assert [stat.date for stat in service.get_daily(user_id)] == [
        date(2024, 5, 8),
        date(2024, 5, 6),
    ]


def test_refresh_replaces_existing_rows(
    meals: MealLogService, stats_repository: InMemoryStatsRepository
) -> None:
    user_id = uuid4()
    meals.create_meal(user_id, draft(date(2024, 5, 6), [food("Rice", 300)]))
    service = StatsService(stats_repository)
    service.refresh(user_id=user_id, today=TODAY)

    meals.create_meal(user_id, draft(date(2024, 5, 6), [food("Rice", 200)]))
    service.refresh(user_id=user_id, today=TODAY)

    daily = service.get_daily(user_id)
    assert len(daily) == 1
    assert daily[0].total_calories == 500
    assert daily[0].meal_count == 2


def test_weekly_rollup_uses_monday_weeks() -> None:
    user_id = uuid4()
    rows = [
        DailyStat(user_id, date(2024, 5, 12), 1000, 50, 100, 30, 3),
        DailyStat(user_id, date(2024, 5, 13), 1500, 60, 150, 40, 4),
        DailyStat(user_id, date(2024, 5, 14), 500, 20, 50, 10, 1),
    ]

    weekly = aggregate_weekly(rows)

    assert [week.week_start_date for week in weekly] == [
        date(2024, 5, 6),
        date(2024, 5, 13),
    ]
    assert weekly[1].total_calories == 2000
    assert weekly[1].avg_daily_calories == 1000
    assert weekly[1].meal_count == 5


def test_recent_week_is_oldest_first(
    meals: MealLogService, stats_repository: InMemoryStatsRepository
) -> None:
    user_id = uuid4()
    meals.create_meal(user_id, draft(date(2024, 5, 8), [food("Egg", 70, protein=6)]))
    meals.create_meal(user_id, draft(date(2024, 5, 3), [food("Egg", 140, protein=12)]))
    meals.create_meal(user_id, draft(date(2024, 4, 1), [food("Egg", 70, protein=6)]))

    totals = StatsService(stats_repository).recent_week(user_id, today=TODAY)

    assert [day.date for day in totals] == [date(2024, 5, 3), date(2024, 5, 8)]
    assert totals[0].calories == 140
    assert totals[0].protein == 12


def test_week_start_of() -> None:
    assert week_start_of(date(2024, 5, 12)) == date(2024, 5, 6)
    assert week_start_of(date(2024, 5, 13)) == date(2024, 5, 13)
