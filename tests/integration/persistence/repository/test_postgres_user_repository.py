"""Integration tests for PostgresUserRepository.

Needs a migrated PostgreSQL database (DATABASE__URL) and
LINKAUTH_INTEGRATION=1. Most tests use fresh provider user IDs; the
last-user tests truncate the users table, so point DATABASE__URL at a
database used only for tests.
"""

import asyncio
import os
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from linkauth.domain.error import NotFoundError
from linkauth.domain.model import Account
from linkauth.domain.repository import UserRepository
from linkauth.domain.value import AccountId
from tests.conftest import make_user
from tests.di import build_test_container
from tests.harness import create_env_fixture

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        os.environ.get("LINKAUTH_INTEGRATION") != "1",
        reason="set LINKAUTH_INTEGRATION=1 to run against PostgreSQL",
    ),
]

integration_env = create_env_fixture(unmock={"persistence"})


@pytest_asyncio.fixture
async def postgres_container():
    """APP-scoped container, for tests that need several sessions at once."""
    container = build_test_container(unmock={"persistence"})
    try:
        yield container
    finally:
        await container.close()


async def reset_users(container, *users) -> None:
    """Empty the users table (accounts cascade), then store the given users."""
    async with container() as request_container:
        session = await request_container.get(AsyncSession)
        await session.execute(text("TRUNCATE users CASCADE"))
        await session.commit()

        repo = await request_container.get(UserRepository)
        for user in users:
            await repo.save(user)


async def count_users(container) -> int:
    async with container() as request_container:
        repo = await request_container.get(UserRepository)
        return await repo.count()


@pytest.mark.asyncio
async def test_save_and_find_by_id(integration_env):
    """Should round-trip a user with its account through the database."""
    # Arrange
    repo = await integration_env.get(UserRepository)
    user = make_user(name="Alice", email_address="alice@example.com")

    # Act
    await repo.save(user)
    found = await repo.find_by_id(user.id)

    # Assert
    assert found is not None
    assert found.id == user.id
    assert found.name == "Alice"
    assert len(found.accounts) == 1
    assert found.accounts[0].provider_user_id == user.accounts[0].provider_user_id
    assert found.accounts[0].tokens == {"access_token": "gho_test"}


@pytest.mark.asyncio
async def test_find_by_provider_account_returns_all_accounts(integration_env):
    """Should load every account of the owner, not just the matching one."""
    # Arrange
    repo = await integration_env.get(UserRepository)
    user = make_user(provider_user_id=uuid4().hex)
    second = Account(
        id=AccountId(uuid4()),
        user_id=user.id,
        provider_id="gitlab",
        provider_user_id=uuid4().hex,
    )
    await repo.save(user.model_copy(update={"accounts": (*user.accounts, second)}))

    # Act
    found = await repo.find_by_provider_account(
        "github", user.accounts[0].provider_user_id
    )

    # Assert
    assert found is not None
    assert found.id == user.id
    assert {account.provider_id for account in found.accounts} == {"github", "gitlab"}


@pytest.mark.asyncio
async def test_find_unknown_identity_returns_none(integration_env):
    repo = await integration_env.get(UserRepository)

    assert await repo.find_by_provider_account("github", uuid4().hex) is None


@pytest.mark.asyncio
async def test_update_changes_user_and_accounts(integration_env):
    """Should update the user row and upsert its accounts."""
    # Arrange
    repo = await integration_env.get(UserRepository)
    user = make_user()
    await repo.save(user)
    account = user.accounts[0].model_copy(
        update={"tokens": {"access_token": "gho_new"}, "username": "alice"}
    )

    # Act
    await repo.update(
        user.model_copy(update={"name": "Renamed", "accounts": (account,)})
    )
    found = await repo.find_by_id(user.id)

    # Assert
    assert found is not None
    assert found.name == "Renamed"
    assert found.accounts[0].tokens == {"access_token": "gho_new"}
    assert found.accounts[0].username == "alice"


@pytest.mark.asyncio
async def test_delete_unless_last_removes_user_and_accounts(integration_env):
    # Arrange
    repo = await integration_env.get(UserRepository)
    keep = make_user()
    doomed = make_user()
    await repo.save(keep)
    await repo.save(doomed)
    before = await repo.count()

    # Act
    deleted = await repo.delete_unless_last(doomed.id)

    # Assert
    assert deleted is True
    assert await repo.count() == before - 1
    assert await repo.find_by_id(doomed.id) is None
    assert (
        await repo.find_by_provider_account(
            "github", doomed.accounts[0].provider_user_id
        )
        is None
    )


@pytest.mark.asyncio
async def test_update_does_not_bring_back_deleted_user(integration_env):
    """Should raise NotFoundError instead of upserting a deleted user."""
    # Arrange
    repo = await integration_env.get(UserRepository)
    keep = make_user()
    doomed = make_user()
    await repo.save(keep)
    await repo.save(doomed)
    assert await repo.delete_unless_last(doomed.id) is True

    # Act & Assert
    with pytest.raises(NotFoundError):
        await repo.update(doomed.model_copy(update={"name": "Renamed"}))
    assert await repo.find_by_id(doomed.id) is None


@pytest.mark.asyncio
async def test_delete_unless_last_refuses_sole_user(postgres_container):
    # Arrange
    alice = make_user()
    await reset_users(postgres_container, alice)

    # Act
    async with postgres_container() as request_container:
        repo = await request_container.get(UserRepository)
        deleted = await repo.delete_unless_last(alice.id)

    # Assert
    assert deleted is False
    assert await count_users(postgres_container) == 1


@pytest.mark.asyncio
async def test_concurrent_deletes_of_last_two_users_keep_one(postgres_container):
    """Should serialise two deletes on separate sessions through the row locks."""
    # Arrange
    alice, bob = make_user(), make_user()
    await reset_users(postgres_container, alice, bob)

    # Act
    async with postgres_container() as first, postgres_container() as second:
        first_repo = await first.get(UserRepository)
        second_repo = await second.get(UserRepository)
        results = await asyncio.gather(
            first_repo.delete_unless_last(alice.id),
            second_repo.delete_unless_last(bob.id),
        )

    # Assert
    assert sorted(results) == [False, True]
    assert await count_users(postgres_container) == 1
