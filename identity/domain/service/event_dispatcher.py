"""Domain event dispatch."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import logfire

from identity.domain.event import UserEvent, encode_event
from identity.domain.model.common import AggregateRoot

from .base import Service


class EventPublisher(ABC):
    """Publish sink for encoded domain events."""

    @abstractmethod
    async def publish(self, topic: str, payload: bytes) -> None:
        """Publish one encoded event.

        Args:
            topic: Routing topic, ``users.<user_id>.<routing_key>``
            payload: JSON encoded event
        """
        pass


class EventDispatcher(Service):
    """Drains aggregates' pending events into the publish sink.

    The sink is injected once at container build time. Without a sink,
    dispatch only drains the buffer, so aggregates can be used in tests that
    wire no event bus.
    """

    def __init__(self, publisher: EventPublisher | None = None) -> None:
        """Initialize event dispatcher.

        Args:
            publisher: Publish sink, or None to drop events
        """
        self.publisher = publisher

    async def notify(self, aggregate: AggregateRoot[UserEvent]) -> list[UserEvent]:
        """Drain pending events and publish them in emission order.

        Publication is fire-and-forget: a failed publish is logged and the
        rest of the batch is dropped, so later events never overtake an
        earlier one on the per-user stream. Never raises for publish errors.

        Args:
            aggregate: Aggregate whose buffer is drained

        Returns:
            Events that were published
        """
        events = aggregate.pull_events()
        if not events:
            return []

        if self.publisher is None:
            logfire.debug(
                "No event publisher configured, dropping events", count=len(events)
            )
            return []

        published: list[UserEvent] = []
        with logfire.span("event_dispatcher.notify", count=len(events)):
            for index, event in enumerate(events):
                topic, payload = encode_event(event)
                try:
                    await self.publisher.publish(topic, payload)
                except Exception as e:
                    logfire.error(
                        "Event publish failed, dropping remaining events",
                        topic=topic,
                        error=str(e),
                        dropped=[dropped.topic for dropped in events[index:]],
                    )
                    break
                published.append(event)
                logfire.debug("Event published", topic=topic)

        return published

    @asynccontextmanager
    async def flushing(
        self, aggregate: AggregateRoot[UserEvent]
    ) -> AsyncIterator[AggregateRoot[UserEvent]]:
        """Flush the aggregate's events when the block exits.

        Events recorded before an error inside the block are still published,
        then the error propagates.
        """
        try:
            yield aggregate
        finally:
            await self.notify(aggregate)
