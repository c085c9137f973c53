"""Unit tests for AccessGuard."""

from uuid import uuid4

import pytest

from linkauth.domain.error import UnauthorizedError
from linkauth.domain.service import AccessGuard, IdentityService, JWTService
from linkauth.domain.value import UserId
from linkauth.persistence.repository.inmemory import InMemoryUserRepository
from tests.conftest import make_user


@pytest.fixture
def repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def jwt_service(auth_settings) -> JWTService:
    return JWTService(auth_settings)


@pytest.fixture
def guard(repo, jwt_service) -> AccessGuard:
    return AccessGuard(jwt_service, IdentityService(repo))


class TestExtractToken:
    """Tests for AccessGuard.extract_token()."""

    def test_header_wins_over_query(self):
        assert AccessGuard.extract_token("Bearer header-token", "query-token") == (
            "header-token"
        )

    def test_scheme_is_case_insensitive(self):
        assert AccessGuard.extract_token("bearer abc", None) == "abc"

    def test_falls_back_to_query_token(self):
        assert AccessGuard.extract_token(None, "query-token") == "query-token"
        assert AccessGuard.extract_token("Basic dXNlcjpwYXNz", "query-token") == (
            "query-token"
        )

    def test_no_token(self):
        assert AccessGuard.extract_token(None, None) is None
        assert AccessGuard.extract_token("Bearer ", None) is None


class TestAuthenticate:
    """Tests for AccessGuard.authenticate()."""

    @pytest.mark.asyncio
    async def test_valid_token_for_active_user(self, guard, repo, jwt_service):
        """Should return the user the token was issued for."""
        # Arrange
        user = make_user()
        await repo.save(user)
        token = jwt_service.issue_token(user.id)

        # Act
        result = await guard.authenticate(f"Bearer {token}", None)

        # Assert
        assert result == user

    @pytest.mark.asyncio
    async def test_valid_query_token(self, guard, repo, jwt_service):
        """Should accept the token from the query parameter."""
        user = make_user()
        await repo.save(user)

        result = await guard.authenticate(None, jwt_service.issue_token(user.id))

        assert result.id == user.id

    @pytest.mark.asyncio
    async def test_missing_token_is_denied(self, guard):
        with pytest.raises(UnauthorizedError):
            await guard.authenticate(None, None)

    @pytest.mark.asyncio
    async def test_invalid_token_is_denied(self, guard):
        with pytest.raises(UnauthorizedError):
            await guard.authenticate("Bearer not-a-token", None)

    @pytest.mark.asyncio
    async def test_inactive_user_is_denied(self, guard, repo, jwt_service):
        """Should deny a valid token whose user is inactive."""
        # Arrange
        user = make_user(is_active=False)
        await repo.save(user)
        token = jwt_service.issue_token(user.id)

        # Act & Assert
        with pytest.raises(UnauthorizedError):
            await guard.authenticate(f"Bearer {token}", None)

    @pytest.mark.asyncio
    async def test_deleted_user_is_denied(self, guard, jwt_service):
        """Should deny a valid token whose user no longer exists."""
        token = jwt_service.issue_token(UserId(uuid4()))

        with pytest.raises(UnauthorizedError):
            await guard.authenticate(f"Bearer {token}", None)


class TestValidate:
    """Tests for AccessGuard.validate()."""

    @pytest.mark.asyncio
    async def test_returns_none_for_inactive_user(self, guard, repo):
        user = make_user(is_active=False)
        await repo.save(user)

        assert await guard.validate(user.id) is None

    @pytest.mark.asyncio
    async def test_returns_active_user(self, guard, repo):
        user = make_user()
        await repo.save(user)

        assert await guard.validate(user.id) == user
