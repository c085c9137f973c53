"""PostgreSQL implementation of User repository."""

from typing import Optional

from sqlalchemy import Select, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from linkauth.domain.error import NotFoundError
from linkauth.domain.model import User
from linkauth.domain.repository import UserRepository
from linkauth.domain.value import UserId
from linkauth.persistence.mappers import (
    ACCOUNT_PREFIX,
    account_to_dict,
    rows_to_user,
    user_to_dict,
)
from linkauth.persistence.tables import accounts_table, users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository.

    Writes commit on the session they were given; the session provider
    rolls back anything left uncommitted when the request ends.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    @staticmethod
    def _select_user_graph() -> Select:
        """Select users joined with their accounts, one row per account."""
        account_columns = [
            column.label(f"{ACCOUNT_PREFIX}{column.name}") for column in accounts_table.c
        ]
        return (
            select(users_table, *account_columns)
            .select_from(
                users_table.outerjoin(
                    accounts_table, users_table.c.id == accounts_table.c.user_id
                )
            )
            .order_by(accounts_table.c.created_at, accounts_table.c.id)
        )

    async def _fetch_user(self, stmt: Select) -> Optional[User]:
        result = await self.session.execute(stmt)
        return rows_to_user(dict(row) for row in result.mappings().all())

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            User with accounts if found, None otherwise
        """
        stmt = self._select_user_graph().where(users_table.c.id == user_id)
        return await self._fetch_user(stmt)

    async def find_by_provider_account(
        self, provider_id: str, provider_user_id: str
    ) -> Optional[User]:
        """Find the user owning a provider account.

        Runs as one statement: the owner is picked by a scalar sub-select
        on accounts, then joined back to all of its accounts.

        Args:
            provider_id: The registered provider ID
            provider_user_id: The user's ID on that provider

        Returns:
            User with accounts if found, None otherwise
        """
        owner_id = (
            select(accounts_table.c.user_id)
            .where(accounts_table.c.provider_id == provider_id)
            .where(accounts_table.c.provider_user_id == provider_user_id)
            .scalar_subquery()
        )
        stmt = self._select_user_graph().where(users_table.c.id == owner_id)
        return await self._fetch_user(stmt)

    async def save(self, user: User) -> User:
        """Insert or overwrite a user and its accounts in one transaction.

        Used for users that were just created; changes to a user that was
        read from the store go through update().

        Args:
            user: User to save

        Returns:
            Saved user
        """
        user_dict = user_to_dict(user)
        user_stmt = insert(users_table).values(**user_dict)
        user_stmt = user_stmt.on_conflict_do_update(
            index_elements=[users_table.c.id],
            set_={
                "email_address": user_stmt.excluded.email_address,
                "name": user_stmt.excluded.name,
                "is_active": user_stmt.excluded.is_active,
                "updated_at": user_stmt.excluded.updated_at,
            },
        )
        await self.session.execute(user_stmt)
        await self._upsert_accounts(user)

        await self.session.commit()
        return user

    async def update(self, user: User) -> User:
        """Update an existing user and upsert its accounts.

        A plain UPDATE takes the user row lock, so it waits for a
        concurrent delete_unless_last and then matches nothing if that
        deleted the user. An upsert would insert the user again.

        Args:
            user: Changed user

        Returns:
            Saved user

        Raises:
            NotFoundError: If the user no longer exists
        """
        stmt = (
            users_table.update()
            .where(users_table.c.id == user.id)
            .values(
                email_address=user.email_address,
                name=user.name,
                is_active=user.is_active,
                updated_at=user.updated_at,
            )
            .returning(users_table.c.id)
        )
        result = await self.session.execute(stmt)
        if result.first() is None:
            await self.session.rollback()
            raise NotFoundError("User", str(user.id))

        await self._upsert_accounts(user)
        await self.session.commit()
        return user

    async def _upsert_accounts(self, user: User) -> None:
        for account in user.accounts:
            account_stmt = insert(accounts_table).values(**account_to_dict(account))
            account_stmt = account_stmt.on_conflict_do_update(
                index_elements=[accounts_table.c.id],
                set_={
                    "tokens": account_stmt.excluded.tokens,
                    "email_address": account_stmt.excluded.email_address,
                    "name": account_stmt.excluded.name,
                    "username": account_stmt.excluded.username,
                    "updated_at": account_stmt.excluded.updated_at,
                },
            )
            await self.session.execute(account_stmt)

    async def delete_unless_last(self, user_id: UserId) -> bool:
        """Delete a user unless it is the last one.

        All user rows are locked in ID order before counting, so a
        concurrent deletion waits for this transaction and then sees the
        result of it.

        Args:
            user_id: User ID to delete

        Returns:
            True if deleted, False if no other user exists
        """
        stmt = select(users_table.c.id).order_by(users_table.c.id).with_for_update()
        result = await self.session.execute(stmt)
        others = [row_id for row_id in result.scalars().all() if row_id != user_id]

        if not others:
            await self.session.rollback()
            return False

        await self.session.execute(
            users_table.delete().where(users_table.c.id == user_id)
        )
        await self.session.commit()
        return True

    async def count(self) -> int:
        """Count all users.

        Returns:
            Number of users
        """
        stmt = select(func.count()).select_from(users_table)
        result = await self.session.execute(stmt)
        return result.scalar_one()
