"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from atlas.config import FeedSettings, Settings, StorageSettings
from atlas.domain.repository import (
    IssueChangeStream,
    IssueRepository,
    KeyValueStore,
    UnitOfWork,
    UserRepository,
)
from atlas.persistence.database import create_engine, create_session_factory
from atlas.persistence.repository import (
    FileKeyValueStore,
    PostgresIssueChangeStream,
    PostgresIssueRepository,
    PostgresUserRepository,
    SessionUnitOfWork,
)
from atlas.util.di.base import ProviderBase
from atlas.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the container closes."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is automatically committed at the end of the request
        if no exception occurred, or rolled back if an exception was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.debug("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        """Provide User repository."""
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_issue_repository(self, session: AsyncSession) -> IssueRepository:
        """Provide Issue repository."""
        return PostgresIssueRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_unit_of_work(self, session: AsyncSession) -> UnitOfWork:
        """Provide unit of work committing the request session early."""
        return SessionUnitOfWork(session)

    @provide(scope=Scope.APP)
    def get_issue_change_stream(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        feed_settings: FeedSettings,
    ) -> IssueChangeStream:
        """Provide the issue change stream (polls with its own sessions)."""
        return PostgresIssueChangeStream(
            session_factory, poll_interval=feed_settings.poll_interval
        )

    @provide(scope=Scope.APP)
    def get_key_value_store(self, storage_settings: StorageSettings) -> KeyValueStore:
        """Provide key-value store for upvote ledgers and tutorial flags."""
        return FileKeyValueStore(storage_settings.path)
