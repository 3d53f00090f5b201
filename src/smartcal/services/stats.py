"""Statistics service: daily/weekly rollups of meal logs."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from smartcal.domain.meals import MealLog
from smartcal.domain.stats import DailyStat, DayTotals, WeeklyStat

DAILY_WINDOW_DAYS = 7
WEEKLY_WINDOW_DAYS = 28

_logger = logging.getLogger(__name__)


class StatsRepository(Protocol):
    """Persistence interface for meal log statistics."""

    def list_meal_logs_since(self, since: date, user_id: UUID | None) -> list[MealLog]:
        """Return meal logs dated on or after ``since``, for one user or all."""

    def list_daily_stats_since(
        self, since: date, user_id: UUID | None
    ) -> list[DailyStat]:
        """Return daily rows dated on or after ``since``, for one user or all."""

    def upsert_daily_stats(self, rows: list[DailyStat]) -> None:
        """Insert or replace daily rows keyed by user and date."""

    def upsert_weekly_stats(self, rows: list[WeeklyStat]) -> None:
        """Insert or replace weekly rows keyed by user and week start."""

    def list_daily_stats(
        self, user_id: UUID, start: date | None, end: date | None
    ) -> list[DailyStat]:
        """Return a user's daily rows, newest first."""

    def list_weekly_stats(
        self, user_id: UUID, start: date | None, end: date | None
    ) -> list[WeeklyStat]:
        """Return a user's weekly rows, newest first."""


@dataclass
class RefreshResult:
    """Number of aggregate rows written by a refresh."""

    daily_rows: int
    weekly_rows: int


@dataclass
class StatsService:
    """Service that maintains and reads aggregate stats tables."""

    repository: StatsRepository

    def refresh(
        self, user_id: UUID | None = None, today: date | None = None
    ) -> RefreshResult:
        """Recompute recent daily rows, then the weekly rows built from them."""
        current = today or _today()
        logs = self.repository.list_meal_logs_since(
            current - timedelta(days=DAILY_WINDOW_DAYS), user_id
        )
        daily = aggregate_daily(logs)
        if daily:
            self.repository.upsert_daily_stats(daily)

        recent_daily = self.repository.list_daily_stats_since(
            current - timedelta(days=WEEKLY_WINDOW_DAYS), user_id
        )
        weekly = aggregate_weekly(recent_daily)
        if weekly:
            self.repository.upsert_weekly_stats(weekly)
        _logger.info(
            "Stats refreshed: user=%s daily=%s weekly=%s",
            user_id or "all",
            len(daily),
            len(weekly),
        )
        return RefreshResult(daily_rows=len(daily), weekly_rows=len(weekly))

    def get_daily(
        self, user_id: UUID, start: date | None = None, end: date | None = None
    ) -> list[DailyStat]:
        """Return precomputed daily rows, newest first."""
        return self.repository.list_daily_stats(user_id, start, end)

    def get_weekly(
        self, user_id: UUID, start: date | None = None, end: date | None = None
    ) -> list[WeeklyStat]:
        """Return precomputed weekly rows, newest first."""
        return self.repository.list_weekly_stats(user_id, start, end)

    def recent_week(self, user_id: UUID, today: date | None = None) -> list[DayTotals]:
        """Return per-date totals of the last week straight from meal logs."""
        current = today or _today()
        logs = self.repository.list_meal_logs_since(
            current - timedelta(days=DAILY_WINDOW_DAYS), user_id
        )
        return [
            DayTotals(
                date=stat.date,
                calories=stat.total_calories,
                protein=stat.total_protein,
                carbs=stat.total_carbs,
                fat=stat.total_fat,
            )
            for stat in aggregate_daily(logs)
        ]


def aggregate_daily(logs: list[MealLog]) -> list[DailyStat]:
    """Group meal logs by user and date.

    Calories come from each log's stored total; macros are summed from its
    food items.
    """
    totals: dict[tuple[UUID, date], DailyStat] = {}
    for log in logs:
        key = (log.user_id, log.date)
        current = totals.get(key) or DailyStat(
            user_id=log.user_id,
            date=log.date,
            total_calories=0,
            total_protein=0,
            total_carbs=0,
            total_fat=0,
            meal_count=0,
        )
        items = log.food_items
        totals[key] = DailyStat(
            user_id=current.user_id,
            date=current.date,
            total_calories=current.total_calories + log.total_calories,
            total_protein=current.total_protein + sum(i.protein for i in items),
            total_carbs=current.total_carbs + sum(i.carbs for i in items),
            total_fat=current.total_fat + sum(i.fat for i in items),
            meal_count=current.meal_count + 1,
        )
    return [totals[key] for key in sorted(totals, key=lambda k: (str(k[0]), k[1]))]


def aggregate_weekly(daily: list[DailyStat]) -> list[WeeklyStat]:
    """Group daily rows into Monday-start weeks per user."""
    groups: dict[tuple[UUID, date], list[DailyStat]] = {}
    for stat in daily:
        week_start = week_start_of(stat.date)
        groups.setdefault((stat.user_id, week_start), []).append(stat)

    weekly = []
    for (user_id, week_start), days in sorted(
        groups.items(), key=lambda entry: (str(entry[0][0]), entry[0][1])
    ):
        total_calories = sum(day.total_calories for day in days)
        weekly.append(
            WeeklyStat(
                user_id=user_id,
                week_start_date=week_start,
                week_end_date=week_start + timedelta(days=6),
                total_calories=total_calories,
                avg_daily_calories=total_calories / len(days),
                total_protein=sum(day.total_protein for day in days),
                total_carbs=sum(day.total_carbs for day in days),
                total_fat=sum(day.total_fat for day in days),
                meal_count=sum(day.meal_count for day in days),
            )
        )
    return weekly


def week_start_of(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def _today() -> date:
    return datetime.now(tz=UTC).date()
