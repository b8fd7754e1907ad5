"""Test harness for unit, integration and E2E tests.

Integration tests assume Postgres is already running and reachable at
DATABASE__URL. Settings are loaded from environment variables (configure via
.env or export).
"""

import pytest_asyncio
from dishka import AsyncContainer

from identity.adapter.eventbus import InMemoryEventPublisher
from identity.application.handler import UserEventHandler
from identity.domain.event import decode_event
from identity.domain.repository import UserRepository
from identity.util.di import Component
from tests.di import build_test_container


async def wire_projection(container: AsyncContainer) -> InMemoryEventPublisher:
    """Apply published events to the repository as they are published.

    Stands in for the stream consumer, so reads after a use case see its
    effects. Only valid with the in-memory repository, which is shared across
    request scopes.

    Returns:
        The capturing publisher, for assertions on published topics
    """
    publisher = await container.get(InMemoryEventPublisher)
    handler = UserEventHandler(await container.get(UserRepository))

    async def project(topic: str, payload: bytes) -> None:
        await handler.handle(decode_event(topic, payload))

    publisher.subscribe(project)
    return publisher


def create_env_fixture(unmock: set[Component] | None = None, project: bool = True):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Projects published events into the in-memory repository (``project``)
    - Yields request-scoped container for service access

    Args:
        unmock: Components to use real implementations for
        project: Wire published events into the repository

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - everything mocked, no services needed
        unit_env = create_env_fixture()

        # Integration tests - real persistence, assumes postgres running
        integration_env = create_env_fixture(unmock={"persistence"}, project=False)

        @pytest.mark.asyncio
        async def test_register(unit_env):
            use_case = await unit_env.get(RegisterUseCase)
            response = await use_case.execute(RegisterRequest(username="alice"))
            assert response.user.username == "alice"
    """
    unmock = unmock or set()

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(unmock=unmock)

        if project and "persistence" not in unmock and "eventbus" not in unmock:
            await wire_projection(container)

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment
