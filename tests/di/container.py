"""Test container with mocked infrastructure."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from linkauth.util.di import PROVIDERS, Component


def build_test_container(unmock: set[Component] | None = None) -> AsyncContainer:
    """Build a container that mocks every mockable component by default.

    Settings still come from the environment, as in production.

    Args:
        unmock: Components to run with their production implementation

    Returns:
        Container that can also back a FastAPI app

    Raises:
        ValueError: If a component is unknown, or is unmocked without the
            components it depends on

    Examples:
        # Unit and e2e tests: in-memory users, mock GitHub
        container = build_test_container()

        # Integration tests: PostgreSQL users
        container = build_test_container(unmock={"persistence"})
    """
    unmock = unmock or set()
    _check_unmock(unmock)

    providers = []
    for base in PROVIDERS:
        use_mock = base.is_mockable() and base.__mock_component__ not in unmock
        providers.append(base.select(use_mock=use_mock)())

    return make_async_container(*providers, FastapiProvider())


def _check_unmock(unmock: set[Component]) -> None:
    mockable = [base for base in PROVIDERS if base.is_mockable()]

    unknown = unmock - {base.__mock_component__ for base in mockable}
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")

    for base in mockable:
        if base.__mock_component__ not in unmock:
            continue
        missing = base.__depends_on__ - unmock
        if missing:
            raise ValueError(
                f"Component '{base.__mock_component__}' requires {set(missing)} "
                "to be unmocked"
            )
