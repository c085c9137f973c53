"""Production container and its FastAPI wiring."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from linkauth.util.di import PROVIDERS


def create_container() -> AsyncContainer:
    """Build the container the service runs with.

    Every component uses its production implementation. Nothing is
    resolved here: settings are read and clients are built on first use,
    which for the provider registry is the application lifespan.

    Returns:
        Container with all production providers
    """
    providers = [base.select(use_mock=False)() for base in PROVIDERS]
    return make_async_container(*providers, FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the app.

    Routes using DishkaRoute get FromDishka parameters injected, and every
    request gets a REQUEST-scoped child container at
    request.state.dishka_container.

    Args:
        app: FastAPI application
        container: APP-scoped container
    """
    setup_dishka(container, app)
