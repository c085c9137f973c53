"""Repository interfaces for the linkauth domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from linkauth.domain.repository.user import UserRepository

__all__ = [
    "UserRepository",
]
