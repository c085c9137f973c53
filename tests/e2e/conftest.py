"""Fixtures for end-to-end tests against the FastAPI app."""

import asyncio

from dishka import AsyncContainer
from fastapi.testclient import TestClient
import pytest

from linkauth.config import Settings
from linkauth.domain.repository import UserRepository
from linkauth.domain.service import JWTService
from linkauth.interface.api.app import create_app
from tests.di import build_test_container


@pytest.fixture
def container() -> AsyncContainer:
    """Mock container: in-memory users, mock GitHub client."""
    return build_test_container()


@pytest.fixture
def repo(container: AsyncContainer) -> UserRepository:
    """The app's user store (APP-scoped, shared with every request)."""
    return asyncio.run(container.get(UserRepository))


@pytest.fixture
def jwt_service() -> JWTService:
    return JWTService(Settings().auth)


@pytest.fixture
def client(container: AsyncContainer, repo: UserRepository):
    """Test client running the app lifespan."""
    _ = repo  # resolve the store before the app starts
    with TestClient(create_app(container=container)) as test_client:
        yield test_client
