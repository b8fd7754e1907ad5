"""Base model for aggregates."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, PrivateAttr

E = TypeVar("E")


class AggregateRoot(BaseModel, Generic[E]):
    """Base class for aggregate roots.

    Aggregates are mutable: state transitions happen through their methods,
    and each transition records a domain event in a transient buffer. The
    buffer is never serialized; ``pull_events`` is the only way to drain it.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    _events: list[E] = PrivateAttr(default_factory=list)

    def record_event(self, event: E) -> None:
        """Append an event to the pending buffer."""
        self._events.append(event)

    @property
    def pending_events(self) -> tuple[E, ...]:
        """Events recorded since the last drain, in emission order."""
        return tuple(self._events)

    def pull_events(self) -> list[E]:
        """Drain and return pending events in emission order."""
        events, self._events = self._events, []
        return events
