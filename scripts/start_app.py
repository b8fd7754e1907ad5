#!/usr/bin/env python3
"""Serve the identity HTTP API with uvicorn."""

import sys

import logfire
import uvicorn

from identity.config import Settings
from identity.util.logging import setup_logging
from identity.util.observability import configure_logfire

APP = "identity.interface.api.app:app"


def main() -> int:
    settings = Settings()

    # Before the app module is imported, so startup errors are traced too
    configure_logfire(settings, service_name="identity-api")
    setup_logging(settings)

    logfire.info("Starting identity API", port=settings.port)
    try:
        uvicorn.run(
            APP,
            host=settings.host,
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )
    except Exception as e:
        logfire.error(
            "Identity API failed to start",
            error_type=type(e).__name__,
            error=str(e),
            _exc_info=sys.exc_info(),
        )
        raise

    return 0


if __name__ == "__main__":
    sys.exit(main())
