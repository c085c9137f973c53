"""Domain value objects for linkauth.

Value objects are immutable and defined by their values, not identity.
"""

from typing import Any

from pydantic import Field

from linkauth.domain.value.common import ValueObject


class StrategyUserData(ValueObject):
    """User data returned by a provider strategy after a successful handshake.

    The provider ID is not part of it: the strategy only knows its own
    protocol, the caller knows which provider it dispatched to.
    """

    tokens: dict[str, Any] = Field(default_factory=dict)  # Opaque provider credentials
    provider_user_id: str  # Permanent ID assigned by the provider
    email_address: str | None = None
    name: str | None = None
    username: str | None = None


class ProviderUserData(StrategyUserData):
    """Normalized provider profile handed to the identity linker."""

    provider_id: str  # Registered provider ID, e.g. "github"

    @classmethod
    def from_strategy(
        cls, provider_id: str, data: StrategyUserData
    ) -> "ProviderUserData":
        """Attach the provider ID to a strategy result."""
        return cls(provider_id=provider_id, **data.model_dump())
