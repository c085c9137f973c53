"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.

User queries select the user columns as-is and the account columns with an
``account_`` prefix, one row per account (outer join, so a user without
accounts yields a single row with NULL account columns).
"""

from typing import Any, Dict, Iterable
from uuid import UUID

from linkauth.domain.model import Account, User
from linkauth.domain.value import AccountId, UserId

ACCOUNT_PREFIX = "account_"


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_account(row: Dict[str, Any], prefix: str = "") -> Account:
    """Convert database row to Account domain model.

    Args:
        row: Database row as dict
        prefix: Column name prefix used in the query

    Returns:
        Account domain model
    """
    return Account(
        id=AccountId(_uuid(row[f"{prefix}id"])),
        user_id=UserId(_uuid(row[f"{prefix}user_id"])),
        provider_id=row[f"{prefix}provider_id"],
        provider_user_id=row[f"{prefix}provider_user_id"],
        tokens=row.get(f"{prefix}tokens") or {},
        email_address=row.get(f"{prefix}email_address"),
        name=row.get(f"{prefix}name"),
        username=row.get(f"{prefix}username"),
        created_at=row[f"{prefix}created_at"],
        updated_at=row[f"{prefix}updated_at"],
    )


def rows_to_user(rows: Iterable[Dict[str, Any]]) -> User | None:
    """Convert the joined rows of one user into a User with its accounts.

    Args:
        rows: Joined user/account rows, all for the same user

    Returns:
        User domain model, or None if there are no rows
    """
    rows = list(rows)
    if not rows:
        return None

    first = rows[0]
    accounts = tuple(
        row_to_account(row, prefix=ACCOUNT_PREFIX)
        for row in rows
        if row.get(f"{ACCOUNT_PREFIX}id") is not None
    )

    return User(
        id=UserId(_uuid(first["id"])),
        email_address=first["email_address"],
        name=first["name"],
        is_active=first["is_active"],
        created_at=first["created_at"],
        updated_at=first["updated_at"],
        accounts=accounts,
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to a users table row (accounts excluded).

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insert/update
    """
    return {
        "id": user.id,
        "email_address": user.email_address,
        "name": user.name,
        "is_active": user.is_active,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def account_to_dict(account: Account) -> Dict[str, Any]:
    """Convert Account domain model to an accounts table row.

    Args:
        account: Account domain model

    Returns:
        Dict suitable for database insert/update
    """
    return {
        "id": account.id,
        "user_id": account.user_id,
        "provider_id": account.provider_id,
        "provider_user_id": account.provider_user_id,
        "tokens": account.tokens,
        "email_address": account.email_address,
        "name": account.name,
        "username": account.username,
        "created_at": account.created_at,
        "updated_at": account.updated_at,
    }
