"""Base class for value objects."""

from pydantic import BaseModel, ConfigDict


class ValueObject(BaseModel):
    """Immutable, compared by value.

    Events and social accounts are value objects, so a published event can
    be shared between the aggregate and the sink without copying.
    """

    model_config = ConfigDict(frozen=True)
