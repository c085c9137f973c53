"""In-memory user repository for testing."""

import asyncio
from typing import Optional

from linkauth.domain.error import NotFoundError
from linkauth.domain.model.user import User
from linkauth.domain.repository.user import UserRepository
from linkauth.domain.value import UserId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing.

    Enforces the same (provider_id, provider_user_id) uniqueness as the
    accounts table. Writes and deletes are serialised by one lock.
    """

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}
        self._lock = asyncio.Lock()

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def find_by_provider_account(
        self, provider_id: str, provider_user_id: str
    ) -> Optional[User]:
        """Find the user owning a provider account."""
        for user in self._users.values():
            if user.find_account(provider_id, provider_user_id):
                return user
        return None

    def _check_accounts_unique(self, user: User) -> None:
        for account in user.accounts:
            for other in self._users.values():
                if other.id == user.id:
                    continue
                if other.find_account(account.provider_id, account.provider_user_id):
                    raise ValueError(
                        "Duplicate account for provider "
                        f"{account.provider_id}: {account.provider_user_id}"
                    )

    async def save(self, user: User) -> User:
        """Save or update a user and its accounts."""
        async with self._lock:
            self._check_accounts_unique(user)
            self._users[user.id] = user
            return user

    async def update(self, user: User) -> User:
        """Update a stored user, refusing to bring back a deleted one."""
        async with self._lock:
            if user.id not in self._users:
                raise NotFoundError("User", str(user.id))
            self._check_accounts_unique(user)
            self._users[user.id] = user
            return user

    async def delete_unless_last(self, user_id: UserId) -> bool:
        """Delete a user unless no other user exists."""
        async with self._lock:
            others = [uid for uid in self._users if uid != user_id]
            if not others:
                return False
            self._users.pop(user_id, None)
            return True

    async def count(self) -> int:
        """Count all users."""
        return len(self._users)
