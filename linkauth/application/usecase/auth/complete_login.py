"""Complete login use case (second leg of a provider login)."""

import secrets
from collections.abc import MutableMapping
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import logfire
from pydantic import BaseModel, SkipValidation

from linkauth.application.usecase.base import BaseUseCase
from linkauth.domain.error import ProviderHandshakeError, UnauthorizedError
from linkauth.domain.model import User
from linkauth.domain.service import IdentityService, JWTService, ProviderRegistry
from linkauth.domain.value import ProviderUserData

from .dispatch_login import SESSION_CALLBACK_URL_KEY, SESSION_STATE_KEY


class CompleteLoginRequest(BaseModel):
    """Complete login request from the provider callback."""

    provider_id: str
    params: dict[str, str]  # Callback query parameters
    session: SkipValidation[MutableMapping[str, Any]]


class CompleteLoginResponse(BaseModel):
    """Complete login response.

    redirect_url is set when the first leg captured a callback URL; it
    already carries the token.
    """

    user: User
    token: str
    redirect_url: str | None = None


class CompleteLoginUseCase(
    BaseUseCase[CompleteLoginRequest, CompleteLoginResponse]
):
    """Use case turning a provider callback into a user and a token."""

    def __init__(
        self,
        provider_registry: ProviderRegistry,
        identity_service: IdentityService,
        jwt_service: JWTService,
    ) -> None:
        """Initialize complete login use case.

        Args:
            provider_registry: Registry of provider strategies
            identity_service: Identity domain service
            jwt_service: JWT token domain service
        """
        self.provider_registry = provider_registry
        self.identity_service = identity_service
        self.jwt_service = jwt_service

    async def execute(self, request: CompleteLoginRequest) -> CompleteLoginResponse:
        """Execute the second leg of a login.

        Steps:
        1. Take the callback URL and state out of the session
        2. Look up the provider strategy
        3. Check the returned state against the stored one
        4. Let the strategy authenticate the callback
        5. Reconcile the provider profile with the user store
        6. Issue a token, and attach it to the callback URL if there is one

        Args:
            request: Provider ID, callback parameters and session

        Returns:
            Saved user, token and optional redirect URL

        Raises:
            NotFoundError: If the provider is not registered
            UnauthorizedError: If the state does not match or the provider
                did not authenticate the user
            ProviderHandshakeError: If the strategy fails
        """
        # Login state is single use, whatever happens next
        callback_url = request.session.pop(SESSION_CALLBACK_URL_KEY, None)
        expected_state = request.session.pop(SESSION_STATE_KEY, None)

        strategy = self.provider_registry.get(request.provider_id)

        if not self._state_matches(request.params.get("state"), expected_state):
            logfire.warn("Login state mismatch", provider=request.provider_id)
            raise UnauthorizedError("Invalid login state")

        try:
            strategy_user = await strategy.authenticate(request.params)
        except Exception as e:
            logfire.error(
                "Provider strategy failed",
                provider=request.provider_id,
                error=str(e),
            )
            raise ProviderHandshakeError(request.provider_id, str(e)) from e

        if strategy_user is None:
            logfire.info("No user returned from provider", provider=request.provider_id)
            raise UnauthorizedError()

        user = await self.identity_service.reconcile(
            ProviderUserData.from_strategy(request.provider_id, strategy_user)
        )
        token = self.jwt_service.issue_token(user.id)

        redirect_url = None
        if callback_url:
            redirect_url = _append_token(callback_url, token)

        logfire.info(
            "Login completed",
            user_id=str(user.id),
            provider=request.provider_id,
            redirect=bool(redirect_url),
        )
        return CompleteLoginResponse(user=user, token=token, redirect_url=redirect_url)

    @staticmethod
    def _state_matches(state: str | None, expected_state: str | None) -> bool:
        if not state or not expected_state:
            return False
        return secrets.compare_digest(state.encode(), expected_state.encode())


def _append_token(url: str, token: str) -> str:
    """Set the token query parameter, keeping the other parameters."""
    parts = urlsplit(url)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key != "token"
    ]
    query.append(("token", token))
    return urlunsplit(parts._replace(query=urlencode(query)))

