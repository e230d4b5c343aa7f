"""In-memory repository implementations for testing."""

from .event import InMemoryEventRepository
from .fun_score import InMemoryFunScoreRepository
from .group import InMemoryGroupRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryEventRepository",
    "InMemoryFunScoreRepository",
    "InMemoryGroupRepository",
    "InMemoryUserRepository",
]
