"""FastAPI application."""

import logging
from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from linkauth.config import Settings
from linkauth.domain.service import ProviderRegistry
from linkauth.interface.api.routes import auth, health
from linkauth.interface.error import register_error_handlers
from linkauth.util.di.container import create_container, setup_di
from linkauth.util.observability import instrument_fastapi

logger = logging.getLogger(__name__)


def create_app(
    container: AsyncContainer | None = None, settings: Settings | None = None
) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use (tests pass a mock container);
            the production container is built when omitted
        settings: Settings for middleware and routing; loaded from the
            environment when omitted
    """
    settings = settings or Settings()
    container = container or create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Provider misconfiguration is fatal here, not on the first login
        registry = await container.get(ProviderRegistry)
        logger.info(f"Authentication providers: {registry.list_provider_ids()}")
        yield
        await container.close()

    app_instance = FastAPI(
        title="linkauth",
        description="Third-party login, account linking and bearer tokens",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    # Signed cookie holding the callback URL and state between login legs
    app_instance.add_middleware(
        SessionMiddleware,
        secret_key=settings.session.secret,
        session_cookie=settings.session.cookie_name,
        max_age=settings.session.max_age,
        same_site=settings.session.same_site,
        https_only=settings.session.https_only,
    )

    setup_di(app_instance, container)
    register_error_handlers(app_instance)

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(
        auth.router, prefix=f"/{settings.auth.path.strip('/')}"
    )

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
