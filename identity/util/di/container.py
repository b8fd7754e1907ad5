"""Production container assembly."""

from dishka import AsyncContainer, Provider, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from identity.util.di import PROVIDERS, get_provider


def create_container(with_fastapi: bool = True) -> AsyncContainer:
    """Build the container with every production provider.

    Args:
        with_fastapi: Add the FastAPI request provider. The event consumer
            runs outside FastAPI and passes False.
    """
    providers: list[Provider] = [
        get_provider(base, use_mock=False)() for base in PROVIDERS
    ]
    if with_fastapi:
        providers.append(FastapiProvider())
    return make_async_container(*providers)


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    setup_dishka(container, app)
