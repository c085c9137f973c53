"""Delete user use case."""

from pydantic import BaseModel

from linkauth.application.usecase.base import BaseUseCase
from linkauth.domain.service import IdentityService
from linkauth.domain.value import UserId


class DeleteUserRequest(BaseModel):
    """Delete user request."""

    user_id: UserId  # From authenticated user


class DeleteUserUseCase(BaseUseCase[DeleteUserRequest, None]):
    """Use case for a user deleting their own account."""

    def __init__(self, identity_service: IdentityService) -> None:
        self.identity_service = identity_service

    async def execute(self, request: DeleteUserRequest) -> None:
        """Delete the user and their linked accounts.

        Raises:
            CannotDeleteLastUserError: If the user is the only one left
        """
        await self.identity_service.delete_user(request.user_id)
