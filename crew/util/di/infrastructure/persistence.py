"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from crew.config import Settings
from crew.domain.repository import (
    EventRepository,
    FunScoreRepository,
    GroupRepository,
    UserRepository,
)
from crew.persistence.database import (
    RequestTransaction,
    create_engine,
    create_session_factory,
    request_session,
)
from crew.persistence.repository import (
    PostgresEventRepository,
    PostgresFunScoreRepository,
    PostgresGroupRepository,
    PostgresUserRepository,
)
from crew.util.di.base import ProviderBase
from crew.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        transaction: RequestTransaction,
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        Every write of a request, cascades included, shares this session's
        transaction. It is committed at the end of the request unless an
        exception escaped or an error handler marked the transaction
        rollback-only.
        """
        async with request_session(session_factory, transaction) as session:
            yield session

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        """Provide User repository."""
        return PostgresUserRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_group_repository(self, session: AsyncSession) -> GroupRepository:
        """Provide Group repository."""
        return PostgresGroupRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_event_repository(self, session: AsyncSession) -> EventRepository:
        """Provide Event repository."""
        return PostgresEventRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_fun_score_repository(self, session: AsyncSession) -> FunScoreRepository:
        """Provide FunScore repository."""
        return PostgresFunScoreRepository(session)
