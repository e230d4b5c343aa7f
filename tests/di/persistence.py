"""Mock persistence providers for testing."""

from dishka import Scope, provide

from crew.domain.repository import (
    EventRepository,
    FunScoreRepository,
    GroupRepository,
    UserRepository,
)
from crew.persistence.repository.inmemory import (
    InMemoryEventRepository,
    InMemoryFunScoreRepository,
    InMemoryGroupRepository,
    InMemoryUserRepository,
)
from crew.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    Uses APP scope so state survives across the requests of one test (an
    e2e flow spans many requests). Each test builds its own container, so
    tests stay isolated.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_user_repository(self) -> UserRepository:
        """Provide in-memory user repository."""
        return InMemoryUserRepository()

    @provide(scope=Scope.APP)
    def get_group_repository(self) -> GroupRepository:
        """Provide in-memory group repository."""
        return InMemoryGroupRepository()

    @provide(scope=Scope.APP)
    def get_event_repository(self) -> EventRepository:
        """Provide in-memory event repository."""
        return InMemoryEventRepository()

    @provide(scope=Scope.APP)
    def get_fun_score_repository(self) -> FunScoreRepository:
        """Provide in-memory Fun Score repository."""
        return InMemoryFunScoreRepository()
