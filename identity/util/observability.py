"""Logfire setup shared by the API, the event consumer and migrations.

Application code logs and traces through logfire directly:

    logfire.info("User activated", user_id=user.id)

    with logfire.span("sign_in", provider=provider.value):
        ...

This module only configures the SDK and instruments third-party clients.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from identity.config import ObservabilitySettings, Settings


def should_send_to_logfire(settings: ObservabilitySettings) -> bool:
    """An explicit ``send_to_logfire`` wins; otherwise send iff a token is set."""
    if settings.send_to_logfire is not None:
        return settings.send_to_logfire
    return bool(settings.logfire_token)


def configure_logfire(settings: Settings, service_name: str = "identity-api") -> None:
    """Configure Logfire for one process.

    Args:
        settings: Application settings
        service_name: Process name, e.g. ``identity-api`` or ``identity-consumer``
    """
    send_to_logfire = should_send_to_logfire(settings.observability)

    logfire.configure(
        service_name=service_name,
        service_version=settings.git_sha,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=settings.observability.logfire_token,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        service_name=service_name,
        instance_name=settings.instance_name,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
    )


def instrument_fastapi(app: FastAPI) -> None:
    # Headers carry session tokens and cookies
    logfire.instrument_fastapi(app, capture_headers=False)


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace projection writes; SQL comments carry the span context."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)


def instrument_httpx() -> None:
    """Trace outbound calls to LINE and the passkey provider."""
    logfire.instrument_httpx()


def instrument_redis() -> None:
    """Trace XADD on publish and XREADGROUP/XACK in the consumer."""
    logfire.instrument_redis()
