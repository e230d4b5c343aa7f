"""Domain layer DI providers."""

from dishka import Scope, provide

from crew.config import (
    AuthSettings,
    EventSettings,
    GroupRegistrySettings,
    ScoringSettings,
)
from crew.domain.repository import (
    EventRepository,
    FunScoreRepository,
    GroupRepository,
    UserRepository,
)
from crew.domain.service import (
    AuthService,
    EventService,
    FunScoreService,
    GroupService,
    JWTService,
    UserService,
)
from crew.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository)

    @provide
    def get_auth_service(
        self,
        user_service: UserService,
        jwt_service: JWTService,
        auth_settings: AuthSettings,
    ) -> AuthService:
        """Provide authentication domain service."""
        return AuthService(
            user_service=user_service,
            jwt_service=jwt_service,
            auth_settings=auth_settings,
        )

    @provide
    def get_group_service(
        self,
        group_repository: GroupRepository,
        event_repository: EventRepository,
        fun_score_repository: FunScoreRepository,
        group_settings: GroupRegistrySettings,
    ) -> GroupService:
        """Provide group domain service."""
        return GroupService(
            group_repository=group_repository,
            event_repository=event_repository,
            fun_score_repository=fun_score_repository,
            group_settings=group_settings,
        )

    @provide
    def get_fun_score_service(
        self,
        fun_score_repository: FunScoreRepository,
        event_repository: EventRepository,
        scoring_settings: ScoringSettings,
    ) -> FunScoreService:
        """Provide Fun Score domain service."""
        return FunScoreService(
            fun_score_repository=fun_score_repository,
            event_repository=event_repository,
            scoring_settings=scoring_settings,
        )

    @provide
    def get_event_service(
        self,
        event_repository: EventRepository,
        group_service: GroupService,
        fun_score_service: FunScoreService,
        event_settings: EventSettings,
    ) -> EventService:
        """Provide event domain service."""
        return EventService(
            event_repository=event_repository,
            group_service=group_service,
            fun_score_service=fun_score_service,
            event_settings=event_settings,
        )
