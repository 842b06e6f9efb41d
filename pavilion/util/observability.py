"""Observability configuration using Logfire.

Usage:
    import logfire

    # Structured logging
    logfire.info("Invite redeemed", invite_id=str(invite.id))

    # Manual spans for critical operations
    with logfire.span("invite_service.redeem", invite_id=str(invite.id)):
        ...

Invite codes are bearer secrets: log them through ``mask_code`` only.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from pavilion.config import Settings

# Headers that must never reach telemetry
_REDACTED_HEADERS = {"authorization", "cookie", "set-cookie"}

# Attribute names scrubbed by logfire on top of its defaults
_SCRUB_PATTERNS = ["invite_code", "auth-token", "jwt_secret"]


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Telemetry leaves the process only when OBSERVABILITY__SEND_TO_LOGFIRE
    says so, or when a token is configured and the flag is unset.

    Args:
        settings: Application settings
    """
    # Priority: explicit setting > token presence > default (False)
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    elif settings.observability.logfire_token:
        send_to_logfire = True
    else:
        send_to_logfire = False

    config_kwargs = {
        "service_name": "gallery-pavilion",
        "service_version": settings.git_sha,
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
        "scrubbing": logfire.ScrubbingOptions(extra_patterns=_SCRUB_PATTERNS),
        "console": logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    }

    if settings.observability.logfire_token:
        config_kwargs["token"] = settings.observability.logfire_token

    logfire.configure(**config_kwargs)

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Instrument FastAPI application with Logfire.

    Request headers are captured except credentials and cookies.

    Args:
        app: FastAPI application instance
    """

    def _map_request_attributes(request, attributes):
        result = {
            key: value
            for key, value in attributes.items()
            if key.lower() not in _REDACTED_HEADERS
        }
        if hasattr(request, "method"):
            result["method"] = request.method
        if hasattr(request, "url"):
            result["path"] = request.url.path
        if hasattr(request, "client") and request.client:
            result["client_host"] = request.client.host
        return result

    logfire.instrument_fastapi(
        app,
        request_attributes_mapper=_map_request_attributes,
    )
    logfire.info("FastAPI instrumented")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Instrument SQLAlchemy engine with Logfire.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,  # Add SQL comments with span context
    )
    logfire.info("SQLAlchemy instrumented")


def instrument_httpx() -> None:
    """Instrument outbound httpx calls (the invite mail webhook)."""
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
