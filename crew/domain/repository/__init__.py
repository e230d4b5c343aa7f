"""Repository interfaces for Crew domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from crew.domain.repository.event import EventRepository
from crew.domain.repository.fun_score import FunScoreRepository
from crew.domain.repository.group import GroupRepository
from crew.domain.repository.user import UserRepository

__all__ = [
    "UserRepository",
    "GroupRepository",
    "EventRepository",
    "FunScoreRepository",
]
