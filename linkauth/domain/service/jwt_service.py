"""JWT token domain service."""

from uuid import UUID

import logfire

from linkauth.config import AuthSettings
from linkauth.domain.value import UserId
from linkauth.util.jwt import JWTError, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for issuing and verifying bearer tokens."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def issue_token(self, user_id: UserId) -> str:
        """Issue a bearer token for a user.

        Args:
            user_id: User ID, used as the token subject

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.issue_token", user_id=str(user_id)):
            token = create_token(str(user_id), self.auth_settings)
            logfire.info(
                "JWT token issued",
                user_id=str(user_id),
                expiry_days=self.auth_settings.jwt_expiry_days,
            )
            return token

    def verify_token(self, token: str) -> UserId:
        """Verify a bearer token and return its subject.

        Args:
            token: JWT token string

        Returns:
            ID of the user the token was issued for

        Raises:
            JWTError: If token is invalid, expired, or its subject is not a user ID
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
            except JWTError as e:
                logfire.info("JWT token verification failed", error=str(e))
                raise

            try:
                user_id = UserId(UUID(payload.sub))
            except ValueError:
                logfire.warn("JWT token subject is not a user ID")
                raise JWTError("Invalid token subject")

            logfire.debug("JWT token verified", user_id=str(user_id))
            return user_id
