"""Account entity.

Links one identity at an external provider to a local user.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from linkauth.domain.model.common import DomainModel, utcnow
from linkauth.domain.value import AccountId, UserId


class Account(DomainModel):
    """Provider identity owned by exactly one user.

    (provider_id, provider_user_id) is unique across all accounts. The
    email, name and username fields mirror the provider profile as of the
    most recent login.
    """

    id: AccountId
    user_id: UserId
    provider_id: str  # Registered provider ID, e.g. "github"
    provider_user_id: str  # Permanent ID from provider
    tokens: dict[str, Any] = Field(default_factory=dict)
    email_address: Optional[str] = None
    name: Optional[str] = None
    username: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def matches(self, provider_id: str, provider_user_id: str) -> bool:
        """Whether this account is the given provider identity."""
        return (
            self.provider_id == provider_id
            and self.provider_user_id == provider_user_id
        )
