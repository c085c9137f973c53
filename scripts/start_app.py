#!/usr/bin/env python3
"""Serve linkauth with uvicorn.

Logging and Logfire are configured before the app module is imported, so
errors raised while the app is built or while its lifespan starts (for
example an unknown provider in AUTH__PROVIDERS) are reported.
"""

import sys

import logfire
import uvicorn

from linkauth.config import Settings
from linkauth.util.logging import setup_logging
from linkauth.util.observability import configure_logfire


def main() -> int:
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    logfire.info(
        "Starting linkauth",
        port=settings.port,
        providers=settings.auth.providers,
        git_sha=settings.git_sha,
    )
    try:
        uvicorn.run(
            "linkauth.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
            proxy_headers=True,
        )
    except Exception as e:
        logfire.error(
            "linkauth failed to start",
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
