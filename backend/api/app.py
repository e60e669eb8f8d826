"""
FastAPI application factory.

Creates the request-side gate: the same cookie channel the session layer
writes is enforced here before any page is served.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from shared.config import Settings, get_settings

from .middleware.session import make_session_middleware
from .routes import health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    yield
    logger.info(f"Shutting down {settings.app_name}")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Overrides the environment-loaded settings (used by tests)

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Session gate for the Pocketbook web app",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    app.middleware("http")(make_session_middleware(settings))

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])

    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        return RedirectResponse(settings.login_path, status_code=307)

    return app


# Application instance for uvicorn
app = create_app()
