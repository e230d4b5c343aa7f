"""PostgreSQL repository implementations."""

from crew.persistence.repository.event import PostgresEventRepository
from crew.persistence.repository.fun_score import PostgresFunScoreRepository
from crew.persistence.repository.group import PostgresGroupRepository
from crew.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresGroupRepository",
    "PostgresEventRepository",
    "PostgresFunScoreRepository",
]
