"""Provider registry assembly for multi-provider authentication."""

from dishka import Scope, provide

from linkauth.adapter.github.client import GitHubOAuthClient
from linkauth.config import Settings
from linkauth.domain.service import ProviderRegistry, ProviderStrategy
from linkauth.util.di.base import ProviderBase
from linkauth.util.error import ConfigurationError


class OAuthAggregatorProvider(ProviderBase):
    """Provider that aggregates the enabled strategies into a registry."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_provider_registry(
        self,
        settings: Settings,
        github_oauth_client: GitHubOAuthClient,
    ) -> ProviderRegistry:
        """Provide the registry of enabled provider strategies.

        Strategies are registered in the order settings.auth.providers
        lists them.

        Args:
            settings: Application settings
            github_oauth_client: GitHub OAuth client (specific type)

        Returns:
            Registry holding every enabled strategy

        Raises:
            ConfigurationError: If a provider is unknown or none is enabled
        """
        available: dict[str, ProviderStrategy] = {
            github_oauth_client.name: github_oauth_client,
        }

        strategies = []
        for provider_id in settings.auth.providers:
            strategy = available.get(provider_id)
            if strategy is None:
                raise ConfigurationError(f"Unknown provider configured: {provider_id}")
            strategies.append(strategy)

        return ProviderRegistry(strategies)
