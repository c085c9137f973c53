"""Domain model entities for linkauth."""

from linkauth.domain.model.account import Account
from linkauth.domain.model.user import User

__all__ = [
    "User",
    "Account",
]
