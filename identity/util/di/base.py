"""Base classes for dependency injection providers."""

from typing import ClassVar, Literal

from dishka import Provider

# External systems that tests can swap for in-process fakes
Component = Literal["persistence", "eventbus", "google", "line", "passkeys"]


class ProviderBase(Provider):
    """Base for the service's DI providers.

    A component base (e.g. ``EventBusProvider``) names the external system it
    wraps; its subclasses are the production and mock implementations, told
    apart by ``__is_mock__``. Providers without a component are always used
    as-is.

    Attributes:
        __mock_component__: External system this provider wraps, or None
        __is_mock__: Whether the provider supplies fakes
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
