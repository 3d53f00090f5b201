"""Tests for container wiring."""

import asyncio

from smartcal.containers import build_container


def test_build_container_without_ai_key_uses_fallbacks(settings) -> None:
    container = build_container(settings)

    assert container.estimation_service.client is None
    assert container.auth_service.default_daily_target == 2000
    asyncio.run(container.close_resources())


def test_build_container_with_ai_key(settings) -> None:
    settings.openai_api_key = "openai-key"

    container = build_container(settings)

    assert container.estimation_service.client is not None
    asyncio.run(container.close_resources())
