"""Dependency injection for linkauth.

PROVIDERS lists the provider of every layer once. The production
container takes the real implementation of each; the test container
(tests/di) takes mocks for the components it is not told to unmock.
"""

from linkauth.util.di.application import ProdApplicationProvider
from linkauth.util.di.base import Component, ProviderBase
from linkauth.util.di.core import ProdConfigProvider
from linkauth.util.di.domain import ProdDomainProvider
from linkauth.util.di.infrastructure import (
    GitHubProvider,
    OAuthAggregatorProvider,
    PersistenceProvider,
    ProdGitHubProvider,
    ProdPersistenceProvider,
)

PROVIDERS: list[type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Mockable components
    GitHubProvider,
    PersistenceProvider,
    # Builds the ProviderRegistry from the enabled strategies
    OAuthAggregatorProvider,
]

__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "GitHubProvider",
    "OAuthAggregatorProvider",
    "PersistenceProvider",
    "ProdGitHubProvider",
    "ProdPersistenceProvider",
]
