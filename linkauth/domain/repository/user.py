"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from linkauth.domain.model.user import User
from linkauth.domain.value import UserId


class UserRepository(ABC):
    """Repository for the User aggregate (user plus linked accounts).

    Defines the contract for user persistence operations.
    Implementations live in the infrastructure layer. Every write method
    is a single atomic unit: it either fully applies and commits, or
    leaves the store unchanged.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID, with accounts populated.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_provider_account(
        self, provider_id: str, provider_user_id: str
    ) -> Optional[User]:
        """Find the user owning a provider account, with accounts populated.

        Args:
            provider_id: The registered provider ID
            provider_user_id: The user's ID on that provider

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Insert or overwrite a user and its accounts.

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update an existing user and upsert its accounts.

        Never re-creates a user: if the user was deleted after it was
        read, nothing is written.

        Args:
            user: The changed user, as read from this repository

        Returns:
            The saved user

        Raises:
            NotFoundError: If the user no longer exists
        """
        pass

    @abstractmethod
    async def delete_unless_last(self, user_id: UserId) -> bool:
        """Delete a user unless no other user would remain.

        The count of other users and the delete happen under one
        consistent view of the store, so concurrent calls cannot remove
        the last two users together.

        Args:
            user_id: The user to delete

        Returns:
            True if the user was deleted, False if it was the last one
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count all users.

        Returns:
            Number of stored users
        """
        pass
