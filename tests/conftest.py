"""Test configuration and fixtures."""

from uuid import uuid4

import pytest

from linkauth.config import AuthSettings
from linkauth.domain.model import Account, User
from linkauth.domain.value import AccountId, ProviderUserData, UserId

TEST_JWT_SECRET = "test-secret-with-enough-length-for-hs256"


def make_provider_user(
    provider_id: str = "github",
    provider_user_id: str = "42",
    **overrides,
) -> ProviderUserData:
    """Helper function to build a provider profile for tests.

    Args:
        provider_id: Registered provider ID
        provider_user_id: User ID on the provider
        **overrides: Any other ProviderUserData field

    Returns:
        ProviderUserData with alice's GitHub profile by default
    """
    fields = {
        "tokens": {"access_token": "gho_test"},
        "email_address": "alice@example.com",
        "name": "Alice",
        "username": "alice",
    }
    fields.update(overrides)
    return ProviderUserData(
        provider_id=provider_id, provider_user_id=provider_user_id, **fields
    )


def make_user(
    provider_id: str = "github",
    provider_user_id: str | None = None,
    **overrides,
) -> User:
    """Helper function to build a user with one linked account.

    Args:
        provider_id: Provider of the linked account
        provider_user_id: User ID on the provider (random when omitted)
        **overrides: Any other User field

    Returns:
        User domain model
    """
    user_id = UserId(uuid4())
    account = Account(
        id=AccountId(uuid4()),
        user_id=user_id,
        provider_id=provider_id,
        provider_user_id=provider_user_id or uuid4().hex,
        tokens={"access_token": "gho_test"},
    )
    fields = {
        "name": "Test User",
        "email_address": "test@example.com",
        "accounts": (account,),
    }
    fields.update(overrides)
    return User(id=user_id, **fields)


@pytest.fixture
def auth_settings() -> AuthSettings:
    """Authentication settings with a fixed test secret."""
    return AuthSettings(jwt_secret=TEST_JWT_SECRET)
