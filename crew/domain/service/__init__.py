"""Domain services."""

from .auth_service import AuthService
from .base import Service
from .event_service import EventService
from .fun_score_service import FunScoreService
from .group_service import GroupService
from .jwt_service import JWTService
from .user_service import UserService

__all__ = [
    "AuthService",
    "EventService",
    "FunScoreService",
    "GroupService",
    "JWTService",
    "Service",
    "UserService",
]
