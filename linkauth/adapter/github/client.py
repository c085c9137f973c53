"""GitHub OAuth 2.0 client implementation.

Implements the GitHub web application flow:
https://docs.github.com/en/apps/oauth-apps/building-oauth-apps/authorizing-oauth-apps
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import httpx
import logfire

from linkauth.adapter.error import ProviderError
from linkauth.domain.service.provider_registry import ProviderStrategy
from linkauth.domain.value import StrategyUserData


class GitHubOAuthError(ProviderError):
    """GitHub OAuth error."""

    pass


class GitHubOAuthClient(ProviderStrategy):
    """Base class for GitHub OAuth clients.

    Provides type distinction for dependency injection.
    """

    name = "github"


class RealGitHubOAuthClient(GitHubOAuthClient):
    """GitHub OAuth 2.0 client.

    The state parameter is generated and checked by the login use cases,
    this client only forwards it to GitHub.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scope: list[str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize GitHub OAuth client.

        Args:
            client_id: GitHub OAuth app client ID
            client_secret: GitHub OAuth app client secret
            redirect_uri: Callback URL registered with GitHub
            scope: Scopes to request
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scope = scope if scope is not None else ["read:user", "user:email"]
        self._transport = transport

        # OAuth endpoints
        self.authorize_url = "https://github.com/login/oauth/authorize"
        self.token_url = "https://github.com/login/oauth/access_token"
        self.user_info_url = "https://api.github.com/user"
        self.user_emails_url = "https://api.github.com/user/emails"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=30.0)

    async def authorization_url(self, state: str) -> str:
        """Build the GitHub authorization URL.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(self.scope),
            "state": state,
        }

        logfire.info(
            "GitHub OAuth authorization initiated",
            redirect_uri=self.redirect_uri,
        )

        return f"{self.authorize_url}?{urlencode(params)}"

    async def authenticate(self, params: Mapping[str, str]) -> StrategyUserData | None:
        """Complete the GitHub OAuth flow from the callback parameters.

        Args:
            params: Query parameters GitHub sent to the callback URL

        Returns:
            User data from GitHub, or None if the user denied access or
            no authorization code was sent

        Raises:
            GitHubOAuthError: If the token exchange or a profile request fails
        """
        if "error" in params:
            logfire.info(
                "GitHub authorization not granted",
                error=params["error"],
                description=params.get("error_description"),
            )
            return None

        code = params.get("code")
        if not code:
            logfire.info("GitHub callback without authorization code")
            return None

        tokens = await self._exchange_code_for_token(code)
        access_token = tokens["access_token"]

        user_info = await self._get_user_info(access_token)
        email = user_info.get("email") or await self._get_primary_email(access_token)

        logfire.info(
            "GitHub OAuth completed",
            username=user_info.get("login"),
            github_id=user_info["id"],
        )

        return StrategyUserData(
            tokens=tokens,
            provider_user_id=str(user_info["id"]),
            email_address=email,
            name=user_info.get("name"),
            username=user_info.get("login"),
        )

    async def _exchange_code_for_token(self, code: str) -> dict[str, Any]:
        """Exchange authorization code for access token.

        GitHub answers 200 with an error body for a bad or expired code.

        Args:
            code: Authorization code from callback

        Returns:
            Token response fields worth keeping on the account

        Raises:
            GitHubOAuthError: If token exchange fails
        """
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "redirect_uri": self.redirect_uri,
        }

        try:
            async with self._client() as client:
                response = await client.post(
                    self.token_url,
                    data=data,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logfire.error("GitHub token exchange HTTP error", error=str(e))
            raise GitHubOAuthError(f"HTTP error during token exchange: {e}")

        if response.status_code != 200:
            logfire.error(
                "GitHub token exchange failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise GitHubOAuthError(f"Token exchange failed: {response.status_code}")

        result = response.json()
        if "error" in result or "access_token" not in result:
            logfire.error(
                "GitHub token exchange rejected",
                error=result.get("error"),
                description=result.get("error_description"),
            )
            raise GitHubOAuthError(
                f"Token exchange rejected: {result.get('error', 'no access token')}"
            )

        return {
            key: result[key]
            for key in ("access_token", "refresh_token", "scope", "token_type")
            if key in result
        }

    async def _get(self, url: str, access_token: str) -> Any:
        try:
            async with self._client() as client:
                response = await client.get(
                    url,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Accept": "application/vnd.github+json",
                    },
                )
        except httpx.HTTPError as e:
            logfire.error("GitHub API HTTP error", url=url, error=str(e))
            raise GitHubOAuthError(f"HTTP error calling {url}: {e}")

        if response.status_code != 200:
            logfire.error(
                "GitHub API request failed",
                url=url,
                status_code=response.status_code,
                error=response.text,
            )
            raise GitHubOAuthError(f"Request to {url} failed: {response.status_code}")

        return response.json()

    async def _get_user_info(self, access_token: str) -> dict[str, Any]:
        """Get the authenticated user's profile.

        Args:
            access_token: OAuth access token

        Returns:
            GitHub user profile

        Raises:
            GitHubOAuthError: If API request fails
        """
        return await self._get(self.user_info_url, access_token)

    async def _get_primary_email(self, access_token: str) -> str | None:
        """Get the primary verified email when the profile hides it.

        Args:
            access_token: OAuth access token

        Returns:
            Primary verified email, or None if there is none

        Raises:
            GitHubOAuthError: If API request fails
        """
        emails = await self._get(self.user_emails_url, access_token)
        for entry in emails:
            if entry.get("primary") and entry.get("verified"):
                return entry.get("email")
        return None


class MockGitHubOAuthClient(GitHubOAuthClient):
    """Mock GitHub OAuth client for testing.

    Returns deterministic test data without making real API calls.
    """

    async def authorization_url(self, state: str) -> str:
        """Return mock authorization URL.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Mock authorization URL
        """
        return f"https://github.com/login/oauth/authorize?state={state}&mock=true"

    async def authenticate(self, params: Mapping[str, str]) -> StrategyUserData | None:
        """Return mock user information.

        Args:
            params: Callback parameters, an "error" key denies access

        Returns:
            Mock GitHub user information
        """
        if "error" in params:
            return None

        return StrategyUserData(
            tokens={"access_token": "mock-token", "token_type": "bearer"},
            provider_user_id="42",
            email_address="alice@example.com",
            name="Alice",
            username="alice",
        )
