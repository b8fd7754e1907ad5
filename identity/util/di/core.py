"""Settings providers."""

from dishka import Scope, provide

from identity.config import AuthSettings, EventBusSettings, ProviderSettings, Settings
from identity.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Settings, read once per container from the environment and ``.env``.

    Sections are provided on their own so adapters depend only on the part
    they read.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_provider_settings(self, settings: Settings) -> ProviderSettings:
        return settings.providers

    @provide(scope=Scope.APP)
    def provide_eventbus_settings(self, settings: Settings) -> EventBusSettings:
        return settings.eventbus
