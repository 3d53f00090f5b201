"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    auth_secret_key: str
    token_ttl_seconds: int = 7 * 24 * 3600
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = None
    openai_store: bool = False
    default_daily_calorie_target: int = 2000
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def has_ai_key(settings: Settings) -> bool:
    """Return True when a usable OpenAI key is configured."""
    return bool(settings.openai_api_key and settings.openai_api_key.strip())
