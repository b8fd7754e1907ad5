"""Event bus infrastructure providers."""

from collections.abc import AsyncIterator

import logfire
import redis.asyncio as aioredis
from dishka import Scope, provide

from identity.adapter.eventbus import RedisStreamEventPublisher
from identity.config import EventBusSettings
from identity.domain.service import EventDispatcher
from identity.util.di.base import ProviderBase
from identity.util.observability import instrument_redis


class EventBusProvider(ProviderBase):
    """Event bus component base."""

    __mock_component__ = "eventbus"


class ProdEventBusProvider(EventBusProvider):
    """Production event bus provider using Redis Streams."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_redis(
        self, settings: EventBusSettings
    ) -> AsyncIterator[aioredis.Redis]:
        """Provide Redis client, closed when the container closes."""
        client = aioredis.from_url(settings.redis_url)
        instrument_redis()
        yield client
        await client.aclose()

    @provide(scope=Scope.APP)
    def get_event_dispatcher(
        self, settings: EventBusSettings, redis_client: aioredis.Redis
    ) -> EventDispatcher:
        """Provide event dispatcher.

        With ``provider="none"`` events are drained without being published.
        """
        if settings.provider == "none":
            logfire.warn("Event bus disabled, domain events will not be published")
            return EventDispatcher(publisher=None)

        return EventDispatcher(
            publisher=RedisStreamEventPublisher(
                redis_client,
                stream_prefix=settings.stream_prefix,
                shard_count=settings.shard_count,
                maxlen=settings.maxlen,
            )
        )
