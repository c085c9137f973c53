#!/usr/bin/env python3
"""Upgrade the linkauth schema, reporting failures to Logfire.

Usage:
    python scripts/run_migrations.py [REVISION]

REVISION defaults to "head". The database URL comes from Settings
(DATABASE__URL), the same as the running service.
"""

import sys

import logfire
from alembic import command
from alembic.config import Config

from linkauth.config import Settings
from linkauth.util.logging import setup_logging
from linkauth.util.observability import configure_logfire


def main(argv: list[str]) -> int:
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    revision = argv[0] if argv else "head"
    config = Config("alembic.ini")

    with logfire.span("migrations.upgrade", revision=revision):
        try:
            command.upgrade(config, revision)
        except Exception as e:
            logfire.error(
                "Schema upgrade failed",
                revision=revision,
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # The deploy must stop rather than serve logins on a stale schema
            raise

    logfire.info("Schema upgraded", revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
