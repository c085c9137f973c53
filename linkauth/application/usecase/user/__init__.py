"""User use cases."""

from .delete_user import DeleteUserRequest, DeleteUserUseCase
from .update_user_profile import (
    UpdateUserProfileRequest,
    UpdateUserProfileResponse,
    UpdateUserProfileUseCase,
)

__all__ = [
    "DeleteUserRequest",
    "DeleteUserUseCase",
    "UpdateUserProfileRequest",
    "UpdateUserProfileResponse",
    "UpdateUserProfileUseCase",
]
