"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from crew.config import (
    AuthSettings,
    EventSettings,
    GroupRegistrySettings,
    ScoringSettings,
    Settings,
)
from crew.persistence.database import RequestTransaction
from crew.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_group_settings(self, settings: Settings) -> GroupRegistrySettings:
        """Provide group registry settings."""
        return settings.groups

    @provide(scope=Scope.APP)
    def provide_event_settings(self, settings: Settings) -> EventSettings:
        """Provide event engine settings."""
        return settings.events

    @provide(scope=Scope.APP)
    def provide_scoring_settings(self, settings: Settings) -> ScoringSettings:
        """Provide Fun Score settings."""
        return settings.scoring

    @provide(scope=Scope.REQUEST)
    def provide_request_transaction(self) -> RequestTransaction:
        """Provide the rollback flag shared by error handlers and the session."""
        return RequestTransaction()
