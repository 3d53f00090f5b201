"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from smartcal.api.admin import router as admin_router
from smartcal.api.auth import router as auth_router
from smartcal.api.foods import router as foods_router
from smartcal.api.meals import router as meals_router
from smartcal.api.stats import router as stats_router
from smartcal.app_logging import configure_logging
from smartcal.containers import AppContainer
from smartcal.domain.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    SmartCalError,
    ValidationFailedError,
)

ERROR_STATUS: dict[type[SmartCalError], int] = {
    ValidationFailedError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(SmartCalError)
    async def domain_error(request: Request, exc: SmartCalError) -> JSONResponse:
        status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
        if status_code >= status.HTTP_401_UNAUTHORIZED:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    app.include_router(auth_router)
    app.include_router(meals_router)
    app.include_router(stats_router)
    app.include_router(foods_router)
    app.include_router(admin_router)

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
