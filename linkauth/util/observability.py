"""Logfire setup and instrumentation.

Services and adapters log through logfire directly:

    import logfire

    logfire.info("Account linked", user_id=str(user.id), provider="github")

    with logfire.span("identity_service.reconcile", provider="github"):
        ...

Bearer tokens travel in the Authorization header and the token query
parameter, and the login state in the session cookie. None of them may
end up in a span.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from linkauth.config import Settings


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire once per process.

    Telemetry is sent to Logfire when send_to_logfire says so; when it is
    unset, whenever a token is configured. The console exporter is always on.

    Args:
        settings: Application settings
    """
    observability = settings.observability
    send_to_logfire = observability.send_to_logfire
    if send_to_logfire is None:
        send_to_logfire = bool(observability.logfire_token)

    logfire.configure(
        service_name="linkauth",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=observability.logfire_token,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )
    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
    )


def _request_attributes(request, attributes: dict) -> dict:
    """Keep method and path only; the query string may hold a token."""
    return {
        **attributes,
        "method": getattr(request, "method", None),
        "path": request.url.path,
    }


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every request the application serves."""
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_request_attributes,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace the statements of the user store."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine)


def instrument_httpx() -> None:
    """Trace calls to identity providers."""
    logfire.instrument_httpx()
