"""FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from identity.interface.api.routes import auth, health, passkeys, users
from identity.interface.error import register_error_handlers
from identity.util.di.container import create_container, setup_di
from identity.util.observability import instrument_fastapi, instrument_httpx

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    # Disposes the database engine and closes the Redis client
    await app.state.dishka_container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use. Defaults to the production container,
            with settings loaded from the environment.
    """
    # Instrument httpx for outbound HTTP requests to identity providers
    instrument_httpx()

    app_instance = FastAPI(
        title="Identity API",
        description="User identity service: registration, social sign-in and passkeys",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    setup_di(app_instance, container or create_container())
    register_error_handlers(app_instance)

    api_router = APIRouter(prefix=API_PREFIX)
    api_router.include_router(auth.router)
    api_router.include_router(users.router)
    api_router.include_router(passkeys.router)

    app_instance.include_router(health.router)
    app_instance.include_router(api_router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
