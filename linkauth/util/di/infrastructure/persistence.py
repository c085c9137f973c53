"""User store providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from linkauth.config import Settings
from linkauth.domain.repository import UserRepository
from linkauth.persistence.database import create_engine, create_session_factory
from linkauth.persistence.repository import PostgresUserRepository
from linkauth.util.di.base import ProviderBase
from linkauth.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Where users and accounts are stored."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """PostgreSQL through one engine per application."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def provide_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        engine = create_engine(settings.database, echo=settings.debug)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def provide_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def provide_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """One session per request.

        Repositories commit their own writes; anything still open when the
        request fails is rolled back before the session closes.
        """
        async with session_factory() as session:
            try:
                yield session
            except Exception as e:
                logfire.warn("Rolling back request session", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def provide_user_repository(self, session: AsyncSession) -> UserRepository:
        return PostgresUserRepository(session)
