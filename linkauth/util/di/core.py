"""Settings providers."""

from dishka import Scope, provide

from linkauth.config import AuthSettings, Settings
from linkauth.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Settings, read once per container from the environment and .env.

    Services that only deal with tokens and providers depend on
    AuthSettings, so their tests can build one directly.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        return settings.auth
