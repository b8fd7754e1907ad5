"""Stdlib logging levels for third-party libraries.

Service code logs through logfire. uvicorn, httpx and redis-py log through
the ``logging`` module, so their output format and verbosity are set here.
"""

import logging
import sys

from identity.config import Settings

# Libraries that are chatty at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "redis", "asyncio")

LOG_FORMAT = "%(asctime)s {instance} %(name)s %(levelname)s %(message)s"


def setup_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT.format(instance=settings.instance_name),
        stream=sys.stdout,
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured for %s at %s",
        settings.environment,
        logging.getLevelName(level),
    )
