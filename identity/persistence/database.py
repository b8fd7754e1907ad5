"""Async engine and session factory for the projection database."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from identity.config import DatabaseSettings


def create_engine(settings: DatabaseSettings, echo: bool = False) -> AsyncEngine:
    """Create the asyncpg engine.

    Args:
        settings: Database URL and pool sizing
        echo: Log every SQL statement
    """
    return create_async_engine(
        settings.url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Repositories flush explicitly; projected rows stay readable after commit
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
