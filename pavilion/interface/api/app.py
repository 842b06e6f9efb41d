"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pavilion.config import Settings
from pavilion.interface.api.errors import register_error_handlers
from pavilion.interface.api.routes import auth, health, invites
from pavilion.interface.api.session import CanonicalHostMiddleware
from pavilion.util.di.container import create_container, setup_di
from pavilion.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


def create_app(
    container: AsyncContainer | None = None, settings: Settings | None = None
) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.
    In tests, conftest.py configures it and passes a mock container.

    Args:
        container: DI container, defaults to the production container
        settings: Settings for middleware setup, defaults to the environment
    """
    settings = settings or Settings()

    # Instrument httpx for outbound HTTP requests (invite emails)
    instrument_httpx()

    app_instance = FastAPI(
        title="Gallery Pavilion API",
        description="Access core for Gallery Pavilion: owner sign-in, guest invites and scoped gallery credentials",
        version="0.1.0",
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",  # Local development
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "X-Requested-With",
        ],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Added last so it runs first: redirect before CORS, routing or auth
    app_instance.add_middleware(
        CanonicalHostMiddleware,
        settings=settings.session,
        https=settings.api.protocol == "https",
    )

    setup_di(app_instance, container or create_container())
    register_error_handlers(app_instance)

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(invites.router)

    return app_instance
