"""Logging configuration for the application."""

import logging
import sys

from atlas.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure standard-library logging.

    Application events go through Logfire; this only sets up the root
    logger so third-party libraries (uvicorn, alembic, asyncpg) log at a
    sensible level.

    Args:
        settings: Application settings
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    # Outbound geocoding calls are traced by Logfire already
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("atlas").setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured: environment=%s, level=%s",
        settings.environment,
        logging.getLevelName(level),
    )
