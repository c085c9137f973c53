"""Async engine and sessions for the user store."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from linkauth.config import DatabaseSettings


def create_engine(database: DatabaseSettings, echo: bool = False) -> AsyncEngine:
    """Create the asyncpg engine.

    Connections are pinged on checkout; a login that fails on a dropped
    connection would otherwise send the user back through the provider.

    Args:
        database: Database settings (URL and pool sizing)
        echo: Log every statement (debug mode)

    Returns:
        Async engine
    """
    return create_async_engine(
        database.url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the factory for request-scoped sessions.

    Repositories return domain models, never ORM state, so nothing needs
    to be expired or autoflushed.
    """
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
