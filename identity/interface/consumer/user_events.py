"""Redis Streams consumer projecting user events into the repository.

Each consumed shard is read through a consumer group. An entry is
acknowledged only after its handler ran in a fresh DI request scope (and so
in its own database transaction). Failed entries stay pending and are
retried before anything newer from the same shard, which keeps one user's
events in order. Entries that can never succeed go to a dead-letter stream
so they do not hold up the rest of their shard.
"""

import asyncio

import logfire
import redis.asyncio as aioredis
from dishka import AsyncContainer
from redis.exceptions import ResponseError

from identity.adapter.eventbus import stream_key
from identity.application.handler import UserEventHandler
from identity.config import EventBusSettings
from identity.domain.error import ConflictError, InvalidEventError, InvalidStateError
from identity.domain.event import decode_event

# Read new entries; any other ID replays this consumer's pending entries
NEW_ENTRIES = ">"
PENDING_ENTRIES = "0"

# Handler errors that redelivery cannot fix
PERMANENT_ERRORS = (ConflictError, InvalidEventError, InvalidStateError)


def _decode(value: bytes | str) -> str:
    return value.decode() if isinstance(value, bytes) else value


class UserEventConsumer:
    """Consumer group pull loop over the user event shards."""

    def __init__(
        self,
        redis_client: aioredis.Redis,
        container: AsyncContainer,
        settings: EventBusSettings,
        retry_backoff_seconds: float = 1.0,
    ) -> None:
        """Initialize consumer.

        Args:
            redis_client: Async Redis client
            container: App-scoped DI container; one request scope per entry
            settings: Event bus settings (group, shards, batch size)
            retry_backoff_seconds: Pause before redelivering a failed entry
        """
        self.redis = redis_client
        self.container = container
        self.settings = settings
        self.retry_backoff_seconds = retry_backoff_seconds
        self.group = settings.consumer_group or "identity"
        self.consumer_name = settings.consumer_name

        # Start on pending entries so a restart resumes unacknowledged work
        self.cursors: dict[str, str] = {
            stream_key(settings.stream_prefix, shard): PENDING_ENTRIES
            for shard in settings.consumed_shards
        }
        self._stopping = False

    @property
    def streams(self) -> list[str]:
        return list(self.cursors)

    async def setup(self) -> None:
        """Create the consumer group on every stream and claim stale entries.

        Raises:
            ResponseError: If group creation fails for a reason other than
                the group already existing
        """
        for stream in self.streams:
            try:
                await self.redis.xgroup_create(
                    stream, self.group, id="0", mkstream=True
                )
                logfire.info("Consumer group created", stream=stream, group=self.group)
            except ResponseError as e:
                if "BUSYGROUP" not in str(e):
                    raise
                logfire.debug("Consumer group exists", stream=stream, group=self.group)

        await self.reclaim_stale()

    async def reclaim_stale(self) -> int:
        """Take over entries another consumer left pending for too long.

        Claimed entries join this consumer's pending list and are processed
        by the next pending read.

        Returns:
            Number of claimed entries
        """
        claimed = 0
        for stream in self.streams:
            start_id = "0-0"
            while True:
                result = await self.redis.xautoclaim(
                    stream,
                    self.group,
                    self.consumer_name,
                    min_idle_time=self.settings.min_idle_ms,
                    start_id=start_id,
                    count=self.settings.batch_size,
                    justid=True,
                )
                next_id, entries = _decode(result[0]), result[1]
                claimed += len(entries)
                if next_id in ("0-0", start_id):
                    break
                start_id = next_id

            self.cursors[stream] = PENDING_ENTRIES

        if claimed:
            logfire.info("Reclaimed stale entries", count=claimed, group=self.group)
        return claimed

    async def run(self) -> None:
        """Set up, then consume until ``stop()`` is called or the task is cancelled."""
        await self.setup()
        logfire.info(
            "Consumer started",
            group=self.group,
            consumer=self.consumer_name,
            streams=self.streams,
        )

        while not self._stopping:
            try:
                await self.poll()
            except asyncio.CancelledError:
                logfire.info("Consumer cancelled")
                break
            except Exception as e:
                logfire.error("Consumer poll failed", error=str(e))
                await asyncio.sleep(self.retry_backoff_seconds)

        logfire.info("Consumer stopped", group=self.group)

    def stop(self) -> None:
        """Stop after the current poll."""
        self._stopping = True

    async def poll(self) -> int:
        """Read one batch from every stream and process it.

        Returns:
            Number of acknowledged entries
        """
        response = await self.redis.xreadgroup(
            groupname=self.group,
            consumername=self.consumer_name,
            streams=dict(self.cursors),
            count=self.settings.batch_size,
            block=self.settings.block_ms,
        )

        acked = 0
        failed = False
        for stream_name, entries in response or []:
            stream = _decode(stream_name)
            if not entries:
                # Pending list drained, switch to new entries
                self.cursors[stream] = NEW_ENTRIES
                continue

            for entry_id, fields in entries:
                if not await self.process(stream, _decode(entry_id), fields):
                    # Later entries of this shard wait for the failed one
                    self.cursors[stream] = PENDING_ENTRIES
                    failed = True
                    break
                acked += 1

        if failed:
            await asyncio.sleep(self.retry_backoff_seconds)
        return acked

    async def process(
        self,
        stream: str,
        entry_id: str,
        fields: dict[bytes | str, bytes | str] | None,
    ) -> bool:
        """Decode and handle one entry, acknowledging it unless it should be retried.

        Entries that redelivery cannot fix are moved to the dead-letter stream
        and acknowledged: undecodable entries, events rejected with a
        permanent domain error, and entries read ``max_deliveries`` times.
        A pending entry trimmed from the stream comes back without fields and
        is acknowledged as is.

        Returns:
            True if the entry was acknowledged
        """
        if fields is None:
            logfire.warn(
                "Acknowledging entry trimmed from the stream",
                stream=stream,
                entry_id=entry_id,
            )
            await self.redis.xack(stream, self.group, entry_id)
            return True

        values = {_decode(key): value for key, value in fields.items()}
        topic = _decode(values.get("topic", ""))

        try:
            event = decode_event(topic, values.get("data", b""))
        except InvalidEventError as e:
            await self.dead_letter(stream, entry_id, values, e)
            return True

        with logfire.span(
            "user_event_consumer.process", stream=stream, entry_id=entry_id, topic=topic
        ):
            try:
                async with self.container() as request_container:
                    handler = await request_container.get(UserEventHandler)
                    await handler.handle(event)
            except PERMANENT_ERRORS as e:
                await self.dead_letter(stream, entry_id, values, e)
                return True
            except Exception as e:
                deliveries = await self.delivery_count(stream, entry_id)
                if deliveries >= self.settings.max_deliveries:
                    await self.dead_letter(stream, entry_id, values, e)
                    return True

                logfire.error(
                    "Event handling failed, leaving entry pending",
                    stream=stream,
                    entry_id=entry_id,
                    topic=topic,
                    deliveries=deliveries,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                return False

        await self.redis.xack(stream, self.group, entry_id)
        return True

    async def delivery_count(self, stream: str, entry_id: str) -> int:
        """Number of times the group delivered a pending entry."""
        pending = await self.redis.xpending_range(
            stream, self.group, min=entry_id, max=entry_id, count=1
        )
        return pending[0]["times_delivered"] if pending else 0

    async def dead_letter(
        self,
        stream: str,
        entry_id: str,
        values: dict[str, bytes | str],
        error: Exception,
    ) -> None:
        """Copy an entry to the dead-letter stream and acknowledge it.

        The copy keeps the original topic and payload, plus where it came
        from and why it was rejected, so it can be inspected and replayed.
        """
        logfire.error(
            "Dead-lettering event",
            stream=stream,
            entry_id=entry_id,
            topic=_decode(values.get("topic", "")),
            error_type=type(error).__name__,
            error=str(error),
        )
        await self.redis.xadd(
            self.settings.dead_letter_stream,
            {
                "topic": values.get("topic", ""),
                "data": values.get("data", ""),
                "stream": stream,
                "entry_id": entry_id,
                "error_type": type(error).__name__,
                "error": str(error),
            },
            maxlen=self.settings.maxlen,
            approximate=True,
        )
        await self.redis.xack(stream, self.group, entry_id)
