"""PostgreSQL repository implementations."""

from linkauth.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
]
