"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from smartcal.adapters.openai_estimation_client import OpenAIEstimationClient
from smartcal.adapters.supabase_meal_log_repository import SupabaseMealLogRepository
from smartcal.adapters.supabase_stats_repository import SupabaseStatsRepository
from smartcal.adapters.supabase_user_repository import SupabaseUserRepository
from smartcal.config import Settings, has_ai_key
from smartcal.services.admin import AdminService
from smartcal.services.auth import AuthService, TokenSigner
from smartcal.services.estimation import EstimationService
from smartcal.services.meals import MealLogService
from smartcal.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    meal_log_service: MealLogService
    stats_service: StatsService
    estimation_service: EstimationService
    admin_service: AdminService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    meal_log_repository = SupabaseMealLogRepository(supabase_client)
    stats_repository = SupabaseStatsRepository(supabase_client)

    auth_service = AuthService(
        repository=user_repository,
        tokens=TokenSigner(
            secret_key=resolved_settings.auth_secret_key,
            max_age_seconds=resolved_settings.token_ttl_seconds,
        ),
        default_daily_target=resolved_settings.default_daily_calorie_target,
    )
    openai_client = (
        OpenAIEstimationClient.create(resolved_settings.openai_api_key)
        if has_ai_key(resolved_settings)
        else None
    )
    estimation_service = EstimationService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    stats_service = StatsService(stats_repository)
    admin_service = AdminService(
        user_repository=user_repository,
        stats_repository=stats_repository,
        stats_service=stats_service,
    )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        meal_log_service=MealLogService(meal_log_repository),
        stats_service=stats_service,
        estimation_service=estimation_service,
        admin_service=admin_service,
        close_resources=close_resources,
    )
