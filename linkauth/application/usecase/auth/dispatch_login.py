"""Dispatch login use case (first leg of a provider login)."""

import secrets
from collections.abc import MutableMapping
from typing import Any
from urllib.parse import urlsplit

import logfire
from pydantic import BaseModel, SkipValidation

from linkauth.application.usecase.base import BaseUseCase
from linkauth.config import AuthSettings
from linkauth.domain.error import ProviderHandshakeError, ValidationError
from linkauth.domain.service import ProviderRegistry

# Keys kept in the signed session cookie between the two legs
SESSION_CALLBACK_URL_KEY = "authCallbackURL"
SESSION_STATE_KEY = "authState"


class DispatchLoginRequest(BaseModel):
    """Dispatch login request.

    The session is the caller's live session mapping, written in place.
    """

    provider_id: str
    callback_url: str | None = None  # Where to send the browser after login
    session: SkipValidation[MutableMapping[str, Any]]


class DispatchLoginResponse(BaseModel):
    """Dispatch login response."""

    authorization_url: str


class DispatchLoginUseCase(
    BaseUseCase[DispatchLoginRequest, DispatchLoginResponse]
):
    """Use case sending the browser to the provider's login page."""

    def __init__(
        self, provider_registry: ProviderRegistry, auth_settings: AuthSettings
    ) -> None:
        """Initialize dispatch login use case.

        Args:
            provider_registry: Registry of provider strategies
            auth_settings: Authentication settings
        """
        self.provider_registry = provider_registry
        self.auth_settings = auth_settings

    async def execute(self, request: DispatchLoginRequest) -> DispatchLoginResponse:
        """Execute the first leg of a login.

        Steps:
        1. Clear login state left over from an earlier attempt
        2. Look up the provider strategy
        3. Validate and remember the callback URL, if any
        4. Generate and remember the state value
        5. Ask the strategy for the authorization URL

        Args:
            request: Provider ID, optional callback URL and session

        Returns:
            Response with the provider authorization URL

        Raises:
            ValidationError: If the callback URL is not acceptable
            NotFoundError: If the provider is not registered (checked before
                the callback URL)
            ProviderHandshakeError: If the strategy fails to build the URL
        """
        session = request.session
        session.pop(SESSION_CALLBACK_URL_KEY, None)
        session.pop(SESSION_STATE_KEY, None)

        strategy = self.provider_registry.get(request.provider_id)

        if request.callback_url:
            self._validate_callback_url(request.callback_url)
            session[SESSION_CALLBACK_URL_KEY] = request.callback_url

        state = secrets.token_urlsafe(32)
        session[SESSION_STATE_KEY] = state

        try:
            authorization_url = await strategy.authorization_url(state)
        except Exception as e:
            logfire.error(
                "Provider failed to build authorization URL",
                provider=request.provider_id,
                error=str(e),
            )
            raise ProviderHandshakeError(request.provider_id, str(e)) from e

        logfire.info(
            "Login dispatched",
            provider=request.provider_id,
            has_callback=bool(request.callback_url),
        )
        return DispatchLoginResponse(authorization_url=authorization_url)

    def _validate_callback_url(self, callback_url: str) -> None:
        """Check the callback URL is absolute http(s) and on an allowed host.

        Raises:
            ValidationError: If the URL is not acceptable
        """
        parts = urlsplit(callback_url)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise ValidationError("Callback URL must be an absolute http(s) URL")

        allowed = self.auth_settings.allowed_callback_hosts
        if allowed and parts.hostname not in allowed:
            logfire.warn("Callback host not allowed", host=parts.hostname)
            raise ValidationError(f"Callback host not allowed: {parts.hostname}")
