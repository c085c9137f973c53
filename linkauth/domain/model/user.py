"""User aggregate root.

Users sign in through any registered provider; every provider identity
they have used is kept as an Account inside the aggregate.
"""

from datetime import datetime

from pydantic import Field

from linkauth.domain.model.account import Account
from linkauth.domain.model.common import DomainModel, utcnow
from linkauth.domain.value import UserId


class User(DomainModel):
    """User aggregate root - provider-agnostic.

    The accounts tuple is ordered by creation and is persisted together
    with the user.
    """

    id: UserId
    email_address: str = ""
    name: str = ""
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    accounts: tuple[Account, ...] = ()

    def find_account(self, provider_id: str, provider_user_id: str) -> Account | None:
        """Return the linked account for a provider identity, if any."""
        return next(
            (a for a in self.accounts if a.matches(provider_id, provider_user_id)),
            None,
        )
