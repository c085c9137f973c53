"""GitHub infrastructure providers."""

from dishka import Scope, provide

from linkauth.adapter.github.client import GitHubOAuthClient, RealGitHubOAuthClient
from linkauth.config import Settings
from linkauth.util.di.base import ProviderBase
from linkauth.util.error import ConfigurationError
from linkauth.util.observability import instrument_httpx


class GitHubProvider(ProviderBase):
    """GitHub component base."""

    __mock_component__ = "github"


class ProdGitHubProvider(GitHubProvider):
    """Production GitHub provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_github_oauth_client(self, settings: Settings) -> GitHubOAuthClient:
        """Provide GitHub OAuth client.

        Returns:
            GitHub OAuth 2.0 client

        Raises:
            ConfigurationError: If GitHub is enabled but its OAuth credentials
                are not configured
        """
        github = settings.auth.github
        if "github" in settings.auth.providers:
            if not github.client_id:
                raise ConfigurationError("GitHub OAuth client ID must be configured")
            if not github.client_secret:
                raise ConfigurationError(
                    "GitHub OAuth client secret must be configured"
                )

        instrument_httpx()

        return RealGitHubOAuthClient(
            client_id=github.client_id,
            client_secret=github.client_secret,
            redirect_uri=settings.auth.provider_callback_url("github"),
            scope=github.scope,
        )
