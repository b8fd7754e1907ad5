"""Event bus adapters."""

from .inmemory import InMemoryEventPublisher
from .redis import RedisStreamEventPublisher, shard_for, stream_key

__all__ = [
    "InMemoryEventPublisher",
    "RedisStreamEventPublisher",
    "shard_for",
    "stream_key",
]
