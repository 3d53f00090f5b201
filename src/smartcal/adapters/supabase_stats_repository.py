"""Supabase repository for meal log statistics."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from smartcal.adapters.supabase_meal_log_repository import (
    MEAL_LOG_COLUMNS,
    parse_meal_log,
)
from smartcal.domain.meals import MealLog, to_calendar_date
from smartcal.domain.stats import DailyStat, WeeklyStat
from smartcal.services.stats import StatsRepository

_DAILY_COLUMNS = (
    "user_id, date, total_calories, total_protein, total_carbs, total_fat, meal_count"
)
_WEEKLY_COLUMNS = (
    "user_id, week_start_date, week_end_date, total_calories, avg_daily_calories, "
    "total_protein, total_carbs, total_fat, meal_count"
)


@dataclass
class SupabaseStatsRepository(StatsRepository):
    """Supabase implementation for stats queries."""

    client: Client

    def list_meal_logs_since(self, since: date, user_id: UUID | None) -> list[MealLog]:
        """Return meal logs dated on or after ``since``."""
        query = (
            self.client.table("meal_logs")
            .select(MEAL_LOG_COLUMNS)
            .gte("date", since.isoformat())
        )
        if user_id is not None:
            query = query.eq("user_id", str(user_id))
        response = query.order("date", desc=False).execute()
        return [parse_meal_log(row) for row in response.data or []]

    def list_daily_stats_since(
        self, since: date, user_id: UUID | None
    ) -> list[DailyStat]:
        """Return daily rows dated on or after ``since``."""
        query = (
            self.client.table("daily_stats")
            .select(_DAILY_COLUMNS)
            .gte("date", since.isoformat())
        )
        if user_id is not None:
            query = query.eq("user_id", str(user_id))
        response = query.order("date", desc=False).execute()
        return [_parse_daily(row) for row in response.data or []]

    def upsert_daily_stats(self, rows: list[DailyStat]) -> None:
        """Insert or replace daily rows."""
        payload = [
            {
                "user_id": str(row.user_id),
                "date": row.date.isoformat(),
                "total_calories": row.total_calories,
                "total_protein": row.total_protein,
                "total_carbs": row.total_carbs,
                "total_fat": row.total_fat,
                "meal_count": row.meal_count,
            }
            for row in rows
        ]
        response = (
            self.client.table("daily_stats")
            .upsert(payload, on_conflict="user_id,date")
            .execute()
        )
        if response.data is None:
            raise RuntimeError("Failed to upsert daily stats")

    def upsert_weekly_stats(self, rows: list[WeeklyStat]) -> None:
        """Insert or replace weekly rows."""
        payload = [
            {
                "user_id": str(row.user_id),
                "week_start_date": row.week_start_date.isoformat(),
                "week_end_date": row.week_end_date.isoformat(),
                "total_calories": row.total_calories,
                "avg_daily_calories": row.avg_daily_calories,
                "total_protein": row.total_protein,
                "total_carbs": row.total_carbs,
                "total_fat": row.total_fat,
                "meal_count": row.meal_count,
            }
            for row in rows
        ]
        response = (
            self.client.table("weekly_stats")
            .upsert(payload, on_conflict="user_id,week_start_date")
            .execute()
        )
        if response.data is None:
            raise RuntimeError("Failed to upsert weekly stats")

    def list_daily_stats(
        self, user_id: UUID, start: date | None, end: date | None
    ) -> list[DailyStat]:
        """Return a user's daily rows, newest first."""
        query = (
            self.client.table("daily_stats")
            .select(_DAILY_COLUMNS)
            .eq("user_id", str(user_id))
        )
        if start:
            query = query.gte("date", start.isoformat())
        if end:
            query = query.lte("date", end.isoformat())
        response = query.order("date", desc=True).execute()
        return [_parse_daily(row) for row in response.data or []]

    def list_weekly_stats(
        self, user_id: UUID, start: date | None, end: date | None
    ) -> list[WeeklyStat]:
        """Return a user's weekly rows, newest first."""
        query = (
            self.client.table("weekly_stats")
            .select(_WEEKLY_COLUMNS)
            .eq("user_id", str(user_id))
        )
        if start:
            query = query.gte("week_start_date", start.isoformat())
        if end:
            query = query.lte("week_start_date", end.isoformat())
        response = query.order("week_start_date", desc=True).execute()
        return [_parse_weekly(row) for row in response.data or []]


def _parse_daily(row: dict[str, object]) -> DailyStat:
    return DailyStat(
        user_id=UUID(str(row["user_id"])),
        date=to_calendar_date(row["date"]),
        total_calories=float(row.get("total_calories") or 0.0),
        total_protein=float(row.get("total_protein") or 0.0),
        total_carbs=float(row.get("total_carbs") or 0.0),
        total_fat=float(row.get("total_fat") or 0.0),
        meal_count=int(row.get("meal_count") or 0),
    )


def _parse_weekly(row: dict[str, object]) -> WeeklyStat:
    return WeeklyStat(
        user_id=UUID(str(row["user_id"])),
        week_start_date=to_calendar_date(row["week_start_date"]),
        week_end_date=to_calendar_date(row["week_end_date"]),
        total_calories=float(row.get("total_calories") or 0.0),
        avg_daily_calories=float(row.get("avg_daily_calories") or 0.0),
        total_protein=float(row.get("total_protein") or 0.0),
        total_carbs=float(row.get("total_carbs") or 0.0),
        total_fat=float(row.get("total_fat") or 0.0),
        meal_count=int(row.get("meal_count") or 0),
    )
