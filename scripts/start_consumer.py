#!/usr/bin/env python3
"""Start the user event consumer that projects events into the database."""

import asyncio
import signal
import sys

import logfire
import redis.asyncio as aioredis

from identity.config import EventBusSettings, Settings
from identity.interface.consumer.user_events import UserEventConsumer
from identity.util.di.container import create_container
from identity.util.logging import setup_logging
from identity.util.observability import configure_logfire


async def run() -> None:
    container = create_container(with_fastapi=False)
    try:
        redis_client = await container.get(aioredis.Redis)
        settings = await container.get(EventBusSettings)
        consumer = UserEventConsumer(redis_client, container, settings)

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, consumer.stop)

        await consumer.run()
    finally:
        await container.close()


def main() -> int:
    """Run the consumer and log any startup errors to Logfire."""
    settings = Settings()

    configure_logfire(settings, service_name="identity-consumer")
    setup_logging(settings)

    try:
        logfire.info(
            "Starting user event consumer",
            group=settings.eventbus.consumer_group,
            shards=settings.eventbus.consumed_shards,
        )
        asyncio.run(run())
        return 0

    except Exception as e:
        logfire.error(
            "Consumer failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
