"""Identity linking domain service."""

from datetime import datetime
from uuid import uuid4

import logfire

from linkauth.domain.error import CannotDeleteLastUserError, NotFoundError
from linkauth.domain.model import Account, User
from linkauth.domain.model.common import utcnow
from linkauth.domain.repository import UserRepository
from linkauth.domain.value import AccountId, ProviderUserData, UserId

from .base import Service


class IdentityService(Service):
    """Domain service linking provider identities to local users.

    Owns the user lifecycle: creation on first login, account refresh on
    every later login, profile updates and self-service deletion.
    """

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize identity service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def reconcile(self, provider_user: ProviderUserData) -> User:
        """Create or update the user and account for a provider profile.

        Steps:
        1. Find the user owning (provider_id, provider_user_id)
        2. If none, start a new user from the provider profile
        3. Take the matching account out of the user's accounts, or start a new one
        4. Overwrite tokens and profile mirror fields from the provider
        5. Put the account back and save user and accounts together

        A user deleted between steps 1 and 5 is not brought back: the login
        starts over with a new user.

        Args:
            provider_user: Normalized provider profile

        Returns:
            The saved user, accounts populated
        """
        provider_id = provider_user.provider_id
        provider_user_id = provider_user.provider_user_id

        with logfire.span(
            "identity_service.reconcile",
            provider=provider_id,
            provider_user_id=provider_user_id,
        ):
            now = utcnow()
            user = await self.user_repository.find_by_provider_account(
                provider_id, provider_user_id
            )

            saved = None
            if user is not None:
                try:
                    saved = await self.user_repository.update(
                        self._link_account(user, provider_user, now)
                    )
                except NotFoundError:
                    logfire.warn(
                        "User deleted during login - creating a new one",
                        user_id=str(user.id),
                        provider=provider_id,
                    )

            if saved is None:
                logfire.info("User not in database - creating", provider=provider_id)
                user = User(
                    id=UserId(uuid4()),
                    name=provider_user.name or "",
                    email_address=provider_user.email_address or "",
                    is_active=True,
                    created_at=now,
                    updated_at=now,
                )
                saved = await self.user_repository.save(
                    self._link_account(user, provider_user, now)
                )

            logfire.info(
                "User saved from provider login",
                user_id=str(saved.id),
                provider=provider_id,
                account_count=len(saved.accounts),
            )
            return saved

    @staticmethod
    def _link_account(
        user: User, provider_user: ProviderUserData, now: datetime
    ) -> User:
        """Return the user with the provider's account created or refreshed."""
        provider_id = provider_user.provider_id
        provider_user_id = provider_user.provider_user_id

        accounts = list(user.accounts)
        index = next(
            (
                i
                for i, account in enumerate(accounts)
                if account.matches(provider_id, provider_user_id)
            ),
            None,
        )

        if index is not None:
            account = accounts.pop(index)
            logfire.debug("Updating account record", account_id=str(account.id))
        else:
            account = Account(
                id=AccountId(uuid4()),
                user_id=user.id,
                provider_id=provider_id,
                provider_user_id=provider_user_id,
                created_at=now,
            )
            logfire.debug("Adding new account record", account_id=str(account.id))

        account = account.model_copy(
            update={
                "tokens": dict(provider_user.tokens),
                "email_address": provider_user.email_address,
                "name": provider_user.name,
                "username": provider_user.username,
                "updated_at": now,
            }
        )
        # Same slot as before: accounts stay in creation order, which is
        # the order the store loads them in
        if index is None:
            accounts.append(account)
        else:
            accounts.insert(index, account)

        return user.model_copy(update={"accounts": tuple(accounts)})

    async def delete_user(self, user_id: UserId) -> None:
        """Delete a user and its accounts.

        Args:
            user_id: User to delete

        Raises:
            CannotDeleteLastUserError: If no other user exists
        """
        with logfire.span("identity_service.delete_user", user_id=str(user_id)):
            deleted = await self.user_repository.delete_unless_last(user_id)
            if not deleted:
                logfire.warn("Refusing to delete last user", user_id=str(user_id))
                raise CannotDeleteLastUserError()
            logfire.info("User deleted", user_id=str(user_id))

    async def update_profile(
        self, user_id: UserId, name: str, email_address: str
    ) -> User:
        """Overwrite a user's name and email address.

        Accounts and the active flag are left as they are.

        Args:
            user_id: User to update
            name: New display name
            email_address: New email address

        Returns:
            The updated user

        Raises:
            NotFoundError: If the user does not exist, or is deleted before
                the change is written
        """
        with logfire.span("identity_service.update_profile", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if user is None:
                raise NotFoundError("User", str(user_id))

            updated = user.model_copy(
                update={
                    "name": name,
                    "email_address": email_address,
                    "updated_at": utcnow(),
                }
            )
            saved = await self.user_repository.update(updated)
            logfire.info("User profile updated", user_id=str(user_id))
            return saved

    async def find_by_id(self, user_id: UserId) -> User | None:
        """Get a user by ID.

        Args:
            user_id: User ID

        Returns:
            User if found, None otherwise
        """
        return await self.user_repository.find_by_id(user_id)
