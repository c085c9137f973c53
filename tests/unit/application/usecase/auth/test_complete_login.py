"""Unit tests for CompleteLoginUseCase."""

from collections.abc import Mapping
from urllib.parse import parse_qs, urlsplit

import pytest

from linkauth.adapter.github import MockGitHubOAuthClient
from linkauth.application.usecase.auth import (
    SESSION_CALLBACK_URL_KEY,
    SESSION_STATE_KEY,
    CompleteLoginRequest,
    CompleteLoginUseCase,
)
from linkauth.domain.error import (
    NotFoundError,
    ProviderHandshakeError,
    UnauthorizedError,
)
from linkauth.domain.service import (
    IdentityService,
    JWTService,
    ProviderRegistry,
    ProviderStrategy,
)
from linkauth.domain.value import StrategyUserData
from linkauth.persistence.repository.inmemory import InMemoryUserRepository


class FailingStrategy(ProviderStrategy):
    """Strategy whose token exchange blows up."""

    name = "failing"

    async def authorization_url(self, state: str) -> str:
        return f"https://failing.test/authorize?state={state}"

    async def authenticate(self, params: Mapping[str, str]) -> StrategyUserData | None:
        raise ConnectionError("token endpoint unreachable")


@pytest.fixture
def repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def jwt_service(auth_settings) -> JWTService:
    return JWTService(auth_settings)


@pytest.fixture
def use_case(repo, jwt_service) -> CompleteLoginUseCase:
    return CompleteLoginUseCase(
        provider_registry=ProviderRegistry([MockGitHubOAuthClient(), FailingStrategy()]),
        identity_service=IdentityService(repo),
        jwt_service=jwt_service,
    )


class TestCompleteLoginUseCase:
    """Tests for CompleteLoginUseCase."""

    @pytest.mark.asyncio
    async def test_login_without_callback_returns_user_and_token(
        self, use_case, repo, jwt_service
    ):
        """Should reconcile the profile and issue a token for the user."""
        # Arrange
        session = {SESSION_STATE_KEY: "s1"}

        # Act
        result = await use_case.execute(
            CompleteLoginRequest(
                provider_id="github",
                params={"code": "abc", "state": "s1"},
                session=session,
            )
        )

        # Assert
        assert result.redirect_url is None
        assert jwt_service.verify_token(result.token) == result.user.id
        assert result.user.accounts[0].provider_user_id == "42"
        assert await repo.find_by_provider_account("github", "42") == result.user
        assert session == {}

    @pytest.mark.asyncio
    async def test_login_with_callback_appends_token(self, use_case, jwt_service):
        """Should add the token to the callback URL, keeping its query."""
        # Arrange
        session = {
            SESSION_STATE_KEY: "s1",
            SESSION_CALLBACK_URL_KEY: "https://app.test/done?next=%2Fhome",
        }

        # Act
        result = await use_case.execute(
            CompleteLoginRequest(
                provider_id="github",
                params={"code": "abc", "state": "s1"},
                session=session,
            )
        )

        # Assert
        url = urlsplit(result.redirect_url)
        query = parse_qs(url.query)
        assert (url.scheme, url.netloc, url.path) == ("https", "app.test", "/done")
        assert query["next"] == ["/home"]
        assert query["token"] == [result.token]
        assert session == {}

    @pytest.mark.asyncio
    async def test_state_mismatch_is_unauthorized(self, use_case, repo):
        """Should refuse a callback whose state was not issued to this session."""
        # Arrange
        session = {
            SESSION_STATE_KEY: "s1",
            SESSION_CALLBACK_URL_KEY: "https://app.test/done",
        }

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await use_case.execute(
                CompleteLoginRequest(
                    provider_id="github",
                    params={"code": "abc", "state": "forged"},
                    session=session,
                )
            )

        assert session == {}
        assert await repo.count() == 0

    @pytest.mark.asyncio
    async def test_missing_session_state_is_unauthorized(self, use_case):
        """Should refuse a callback when no login was dispatched."""
        with pytest.raises(UnauthorizedError):
            await use_case.execute(
                CompleteLoginRequest(
                    provider_id="github",
                    params={"code": "abc", "state": "s1"},
                    session={},
                )
            )

    @pytest.mark.asyncio
    async def test_denied_access_is_unauthorized(self, use_case, repo):
        """Should raise UnauthorizedError when the strategy returns no user."""
        with pytest.raises(UnauthorizedError):
            await use_case.execute(
                CompleteLoginRequest(
                    provider_id="github",
                    params={"error": "access_denied", "state": "s1"},
                    session={SESSION_STATE_KEY: "s1"},
                )
            )

        assert await repo.count() == 0

    @pytest.mark.asyncio
    async def test_strategy_error_becomes_handshake_error(self, use_case):
        """Should wrap strategy exceptions, keeping the cause."""
        session = {SESSION_STATE_KEY: "s1"}

        with pytest.raises(ProviderHandshakeError) as exc_info:
            await use_case.execute(
                CompleteLoginRequest(
                    provider_id="failing",
                    params={"code": "abc", "state": "s1"},
                    session=session,
                )
            )

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert str(exc_info.value) == "Login with failing failed"
        assert exc_info.value.reason == "token endpoint unreachable"
        assert session == {}

    @pytest.mark.asyncio
    async def test_unknown_provider_still_clears_session(self, use_case):
        """Should consume the login state even for an unknown provider."""
        session = {
            SESSION_STATE_KEY: "s1",
            SESSION_CALLBACK_URL_KEY: "https://app.test/done",
        }

        with pytest.raises(NotFoundError):
            await use_case.execute(
                CompleteLoginRequest(
                    provider_id="myspace",
                    params={"code": "abc", "state": "s1"},
                    session=session,
                )
            )

        assert session == {}
