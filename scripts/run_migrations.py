#!/usr/bin/env python3
"""Apply Alembic migrations, reporting failures to Logfire.

Usage:
    python scripts/run_migrations.py            # upgrade to head
    python scripts/run_migrations.py 3c1f5a9e   # upgrade to a revision
"""

import sys
from pathlib import Path

import logfire
from alembic import command
from alembic.config import Config

from atlas.config import Settings
from atlas.util.observability import configure_logfire

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def main(argv: list[str]) -> int:
    """Upgrade the schema; the target revision defaults to head."""
    settings = Settings()
    configure_logfire(settings)
    revision = argv[0] if argv else "head"

    with logfire.span("run_migrations", revision=revision, environment=settings.environment):
        try:
            # migrations/env.py reads the database URL from Settings
            command.upgrade(Config(str(ALEMBIC_INI)), revision)
        except Exception as e:
            logfire.error(
                "Database migration failed",
                revision=revision,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # The app must not start against a half-migrated schema
            raise

    logfire.info("Database migrations completed", revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
