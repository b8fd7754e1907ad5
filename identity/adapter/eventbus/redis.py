"""Redis Streams event publisher.

Events are appended to ``<stream_prefix>:<shard>`` streams. The shard is a
stable hash of the user ID, so every event of one user lands on the same
stream and is consumed in publication order.
"""

import hashlib

import logfire
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from identity.adapter.error import PublishError
from identity.domain.service.event_dispatcher import EventPublisher


def shard_for(user_id: str, shard_count: int) -> int:
    """Stable shard for a user ID.

    Uses md5 rather than ``hash()``, which is salted per process.
    """
    digest = hashlib.md5(user_id.encode()).digest()[:8]
    return int.from_bytes(digest, byteorder="big") % shard_count


def stream_key(stream_prefix: str, shard: int) -> str:
    return f"{stream_prefix}:{shard}"


def user_id_from_topic(topic: str) -> str:
    """Extract the user ID from ``users.<user_id>.<routing_key>``."""
    parts = topic.split(".")
    if len(parts) != 3:
        raise PublishError(f"invalid event topic: {topic}")
    return parts[1]


class RedisStreamEventPublisher(EventPublisher):
    """Publishes encoded events with XADD."""

    def __init__(
        self,
        redis_client: aioredis.Redis,
        stream_prefix: str = "users",
        shard_count: int = 4,
        maxlen: int = 100_000,
    ) -> None:
        """Initialize publisher.

        Args:
            redis_client: Async Redis client
            stream_prefix: Stream name prefix
            shard_count: Number of shards events are spread over
            maxlen: Approximate cap on each stream's length
        """
        self.redis = redis_client
        self.stream_prefix = stream_prefix
        self.shard_count = shard_count
        self.maxlen = maxlen

    def stream_for(self, topic: str) -> str:
        user_id = user_id_from_topic(topic)
        return stream_key(self.stream_prefix, shard_for(user_id, self.shard_count))

    async def publish(self, topic: str, payload: bytes) -> None:
        """Append one event to its user's shard stream.

        Raises:
            PublishError: If the topic is malformed or Redis fails
        """
        stream = self.stream_for(topic)
        try:
            message_id = await self.redis.xadd(
                stream,
                {"topic": topic, "data": payload},
                maxlen=self.maxlen,
                approximate=True,
            )
        except RedisError as e:
            logfire.error("Event XADD failed", stream=stream, topic=topic, error=str(e))
            raise PublishError(f"failed to publish {topic}: {e}") from e

        logfire.debug(
            "Event appended", stream=stream, topic=topic, message_id=str(message_id)
        )
