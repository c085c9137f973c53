"""Domain value objects for linkauth."""

from linkauth.domain.value.identifiers import AccountId, UserId
from linkauth.domain.value.types import ProviderUserData, StrategyUserData

__all__ = [
    # Identifiers
    "UserId",
    "AccountId",
    # Types
    "StrategyUserData",
    "ProviderUserData",
]
