"""Observability configuration using Logfire.

Logfire provides:
- Structured logging with OpenTelemetry
- Distributed tracing
- Integration with FastAPI, SQLAlchemy and httpx

Usage:
    import logfire

    # Structured logging
    logfire.info("Issue reported", issue_id=issue.id, category=issue.category)

    # Manual spans for critical operations
    with logfire.span("issue_service.report_issue", reporter_id=user.uid):
        ...
"""

from typing import Any

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from atlas.config import Settings
from atlas.util.error import MissingSettingError

DEFAULT_PROVIDER_SECRET = "CHANGE_ME_IN_PRODUCTION"


def check_production_settings(settings: Settings) -> None:
    """Refuse to run outside development with placeholder credentials.

    Raises:
        MissingSettingError: If a required production setting is missing
    """
    if settings.environment in ("test", "development"):
        return
    if settings.auth.provider_secret == DEFAULT_PROVIDER_SECRET:
        raise MissingSettingError("AUTH__PROVIDER_SECRET", settings.environment)
    if not settings.geocoding.access_token:
        raise MissingSettingError("GEOCODING__ACCESS_TOKEN", settings.environment)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Development sends nothing unless a token is provided; with a token,
    telemetry goes to Logfire cloud. ``OBSERVABILITY__SEND_TO_LOGFIRE``
    overrides either way.

    Args:
        settings: Application settings
    """
    # Priority: explicit setting > token presence > default (False)
    if settings.observability.send_to_logfire is not None:
        send_to_logfire = settings.observability.send_to_logfire
    else:
        send_to_logfire = bool(settings.observability.logfire_token)

    config_kwargs: dict[str, Any] = {
        "service_name": "atlas-backend",
        "service_version": settings.git_sha,
        "environment": settings.environment,
        "send_to_logfire": send_to_logfire,
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
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Instrument FastAPI application with Logfire.

    Traces HTTP requests and the live map WebSocket.

    Args:
        app: FastAPI application instance
    """

    def _map_request_attributes(request, attributes):
        """Map request attributes, handling both HTTP and WebSocket requests."""
        result = {**attributes}

        # WebSocket connections have no method
        if hasattr(request, "method"):
            result["method"] = request.method
        if hasattr(request, "url"):
            result["path"] = request.url.path
        if hasattr(request, "client") and request.client:
            result["client_host"] = request.client.host

        return result

    logfire.instrument_fastapi(
        app,
        capture_headers=False,  # Authorization carries identity tokens
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
    """Instrument httpx so geocoding calls show up as spans."""
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
