"""Bearer token access guard."""

import logfire

from linkauth.domain.error import UnauthorizedError
from linkauth.domain.model import User
from linkauth.domain.value import UserId
from linkauth.util.jwt import JWTError

from .base import Service
from .identity_service import IdentityService
from .jwt_service import JWTService


class AccessGuard(Service):
    """Resolves a bearer token to an active user or denies access."""

    def __init__(
        self, jwt_service: JWTService, identity_service: IdentityService
    ) -> None:
        """Initialize access guard.

        Args:
            jwt_service: JWT token domain service
            identity_service: Identity domain service
        """
        self.jwt_service = jwt_service
        self.identity_service = identity_service

    @staticmethod
    def extract_token(
        authorization: str | None, query_token: str | None
    ) -> str | None:
        """Pick the bearer token from a request.

        The Authorization header wins over the token query parameter.

        Args:
            authorization: Authorization header value
            query_token: Value of the token query parameter

        Returns:
            Token if one was supplied, None otherwise
        """
        if authorization:
            scheme, _, credentials = authorization.partition(" ")
            if scheme.lower() == "bearer" and credentials.strip():
                return credentials.strip()
        if query_token:
            return query_token
        return None

    async def authenticate(
        self, authorization: str | None, query_token: str | None
    ) -> User:
        """Authenticate a request from its bearer token.

        Args:
            authorization: Authorization header value
            query_token: Value of the token query parameter

        Returns:
            The active user the token was issued for

        Raises:
            UnauthorizedError: If the token is missing or invalid, or its
                user does not exist or is inactive
        """
        token = self.extract_token(authorization, query_token)
        if token is None:
            raise UnauthorizedError()

        try:
            user_id = self.jwt_service.verify_token(token)
        except JWTError as e:
            raise UnauthorizedError() from e

        user = await self.validate(user_id)
        if user is None:
            raise UnauthorizedError()
        return user

    async def validate(self, user_id: UserId) -> User | None:
        """Resolve a verified token subject to an active user.

        Args:
            user_id: Subject of a verified token

        Returns:
            The user if it exists and is active, None otherwise
        """
        user = await self.identity_service.find_by_id(user_id)

        if user is not None and user.is_active:
            logfire.debug("User valid and active", user_id=str(user_id))
            return user

        # Warn: the caller holds a valid key, but the user is gone or disabled
        logfire.warn(
            "User not found or inactive",
            user_id=str(user_id),
            active=user.is_active if user else None,
        )
        return None
