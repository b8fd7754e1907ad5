"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

import logfire
from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from identity.config import Settings
from identity.domain.repository import UserRepository
from identity.persistence.database import create_engine, create_session_factory
from identity.persistence.repository import PostgresUserRepository
from identity.util.di.base import ProviderBase
from identity.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """User projection storage."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Postgres projection storage.

    One session per request scope: an API request, or one consumed event.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        engine = create_engine(settings.database, echo=settings.debug)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide a session whose transaction spans the scope.

        Commits when the scope exits cleanly. If the scope raised, the
        transaction is rolled back, so a failed projection leaves no partial
        writes and the consumer can redeliver the event.
        """
        async with session_factory() as session:
            try:
                yield session
            except Exception as e:
                logfire.warn(
                    "Rolling back projection transaction",
                    error_type=type(e).__name__,
                    error=str(e),
                )
                await session.rollback()
                raise
            else:
                await session.commit()

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        return PostgresUserRepository(session)
