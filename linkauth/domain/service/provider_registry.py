"""Provider strategies and the registry that dispatches to them."""

from collections.abc import Iterable, Mapping

import logfire

from linkauth.domain.error import NotFoundError
from linkauth.domain.value import StrategyUserData
from linkauth.util.error import ConfigurationError

from .base import Service


class ProviderStrategy:
    """Generic login strategy interface for all identity providers.

    A strategy performs the provider-specific handshake. Leg one sends the
    browser to the provider, leg two turns the provider's callback
    parameters into a StrategyUserData.
    """

    name: str

    async def authorization_url(self, state: str) -> str:
        """Build the provider URL to send the browser to.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        raise NotImplementedError

    async def authenticate(self, params: Mapping[str, str]) -> StrategyUserData | None:
        """Complete the handshake from the provider's callback parameters.

        Args:
            params: Query parameters of the callback request

        Returns:
            Provider user data, or None if the provider did not
            authenticate the user (e.g. access denied)

        Raises:
            Exception: Any provider or transport failure
        """
        raise NotImplementedError


class ProviderRegistry(Service):
    """Registry of provider strategies keyed by provider ID.

    Built once at startup and read-only afterwards.
    """

    def __init__(self, strategies: Iterable[ProviderStrategy]) -> None:
        """Register the configured strategies.

        Args:
            strategies: Strategies to register under their own names

        Raises:
            ConfigurationError: If no strategy is given, or a name repeats
        """
        self._strategies: dict[str, ProviderStrategy] = {}
        for strategy in strategies:
            self.register(strategy.name, strategy)

        if not self._strategies:
            raise ConfigurationError(
                "Invalid configuration - at least one provider strategy required"
            )

        logfire.info("Provider strategies registered", providers=self.list_provider_ids())

    def register(self, name: str, strategy: ProviderStrategy) -> None:
        """Register a strategy under a provider ID.

        Args:
            name: Provider ID
            strategy: Strategy handling that provider

        Raises:
            ConfigurationError: If the provider ID is already registered
        """
        if name in self._strategies:
            raise ConfigurationError(f"Provider already registered: {name}")
        self._strategies[name] = strategy

    def get(self, provider_id: str) -> ProviderStrategy:
        """Get the strategy for a provider.

        Args:
            provider_id: Provider ID from the request

        Returns:
            Registered strategy

        Raises:
            NotFoundError: If the provider is not registered
        """
        strategy = self._strategies.get(provider_id)
        if strategy is None:
            raise NotFoundError("Provider", provider_id)
        return strategy

    def list_provider_ids(self) -> list[str]:
        """List registered provider IDs in registration order."""
        return list(self._strategies)
