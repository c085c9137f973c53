"""Update user profile use case."""

from pydantic import BaseModel, Field

from linkauth.application.usecase.base import BaseUseCase
from linkauth.domain.model import User
from linkauth.domain.service import IdentityService
from linkauth.domain.value import UserId


class UpdateUserProfileRequest(BaseModel):
    """Update user profile request."""

    user_id: UserId  # From authenticated user
    name: str = Field(max_length=255)
    email_address: str = Field(max_length=255)


class UpdateUserProfileResponse(BaseModel):
    """Update user profile response."""

    user: User


class UpdateUserProfileUseCase(
    BaseUseCase[UpdateUserProfileRequest, UpdateUserProfileResponse]
):
    """Use case for updating a user's own profile.

    Users can change their name and email address. Linked accounts and
    the active flag are not changed through this endpoint.
    """

    def __init__(self, identity_service: IdentityService) -> None:
        """Initialize update user profile use case.

        Args:
            identity_service: Identity domain service
        """
        self.identity_service = identity_service

    async def execute(
        self, request: UpdateUserProfileRequest
    ) -> UpdateUserProfileResponse:
        """Execute update user profile flow.

        Args:
            request: Request with user ID and new profile fields

        Returns:
            Updated user

        Raises:
            NotFoundError: If user not found
        """
        user = await self.identity_service.update_profile(
            request.user_id, request.name, request.email_address
        )
        return UpdateUserProfileResponse(user=user)
