"""Container fixtures for unit and integration tests.

Integration fixtures expect a migrated PostgreSQL at DATABASE__URL.
"""

import pytest_asyncio

from linkauth.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Make a fixture yielding a REQUEST-scoped test container.

    Each test gets a fresh APP container, so in-memory users never leak
    between tests. The container is closed afterwards, which disposes the
    engine when persistence is unmocked.

    Args:
        unmock: Components to run with their production implementation

    Returns:
        Async pytest fixture

    Usage:
        unit_env = create_env_fixture()
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_reconcile(unit_env):
            service = await unit_env.get(IdentityService)
            ...
    """

    @pytest_asyncio.fixture
    async def _env():
        container = build_test_container(unmock=unmock)
        try:
            async with container() as request_container:
                yield request_container
        finally:
            await container.close()

    return _env
