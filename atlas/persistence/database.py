"""PostgreSQL engine and sessions.

Request handlers get one session (one transaction) per request scope. The
change stream polls with short-lived sessions of its own.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from atlas.config import Settings

APPLICATION_NAME = "atlas-civico-api"


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine.

    Args:
        settings: Application settings

    Returns:
        Engine tagged with the application name, so polling and request
        connections are recognizable in ``pg_stat_activity``
    """
    database = settings.database
    return create_async_engine(
        database.url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
        pool_recycle=database.pool_recycle,
        connect_args={
            "command_timeout": database.command_timeout,
            "server_settings": {"application_name": APPLICATION_NAME},
        },
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory; repositories flush explicitly where they need ids."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
