#!/usr/bin/env python3
"""Upgrade the projection schema to the latest revision.

Runs before the API and consumer start; a failure exits non-zero so neither
starts against a stale schema.
"""

import sys

import logfire
from alembic import command
from alembic.config import Config

from identity.config import Settings
from identity.util.observability import configure_logfire

ALEMBIC_INI = "alembic.ini"


def main() -> int:
    settings = Settings()
    configure_logfire(settings, service_name="identity-migrations")

    with logfire.span("migrations.upgrade", revision="head"):
        try:
            command.upgrade(Config(ALEMBIC_INI), "head")
        except Exception as e:
            logfire.error(
                "Schema upgrade failed",
                error_type=type(e).__name__,
                error=str(e),
                _exc_info=sys.exc_info(),
            )
            raise

    logfire.info("Schema up to date")
    return 0


if __name__ == "__main__":
    sys.exit(main())
