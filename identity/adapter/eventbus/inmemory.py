"""In-memory event publisher."""

from collections.abc import Awaitable, Callable

from identity.domain.service.event_dispatcher import EventPublisher

Subscriber = Callable[[str, bytes], Awaitable[None]]


class InMemoryEventPublisher(EventPublisher):
    """Records published events and forwards them to subscribers.

    Used by tests and local runs without Redis. Subscribers run inline, in
    publication order.
    """

    def __init__(self) -> None:
        self.messages: list[tuple[str, bytes]] = []
        self.subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> None:
        self.subscribers.append(subscriber)

    async def publish(self, topic: str, payload: bytes) -> None:
        self.messages.append((topic, payload))
        for subscriber in self.subscribers:
            await subscriber(topic, payload)

    @property
    def topics(self) -> list[str]:
        return [topic for topic, _ in self.messages]

    def clear(self) -> None:
        self.messages.clear()
