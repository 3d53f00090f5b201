"""Admin service for reporting."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

from smartcal.domain.errors import PermissionDeniedError
from smartcal.domain.users import UserRecord, UserRole
from smartcal.services.auth import UserRepository
from smartcal.services.stats import RefreshResult, StatsRepository, StatsService


@dataclass
class AdminService:
    """Service for admin dashboards."""

    user_repository: UserRepository
    stats_repository: StatsRepository
    stats_service: StatsService

    def list_users(
        self, actor: UserRecord, today: date | None = None
    ) -> list[dict[str, object]]:
        """Return users with usage summaries."""
        _require_admin(actor)
        current = today or datetime.now(tz=UTC).date()
        start_7d = current - timedelta(days=7)
        start_30d = current - timedelta(days=30)
        summaries = []
        for user in self.user_repository.list_users():
            logs_30d = self.stats_repository.list_meal_logs_since(start_30d, user.id)
            logs_7d = [log for log in logs_30d if log.date >= start_7d]
            total_calories_7d = sum(log.total_calories for log in logs_7d)
            summaries.append(
                {
                    "id": str(user.id),
                    "username": user.username,
                    "email": user.email,
                    "role": user.role.value,
                    "dailyCalorieTarget": user.daily_calorie_target,
                    "logsLast7d": len(logs_7d),
                    "logsLast30d": len(logs_30d),
                    "avgCalories7d": total_calories_7d / 7,
                }
            )
        return summaries

    def refresh_all_stats(self, actor: UserRecord) -> RefreshResult:
        """Rebuild aggregate stats for every user."""
        _require_admin(actor)
        return self.stats_service.refresh(user_id=None)


def _require_admin(actor: UserRecord) -> None:
    if actor.role is not UserRole.ADMIN:
        raise PermissionDeniedError("Admin access required")
