"""Interface layer errors and HTTP error mapping."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from identity.adapter.error import ProviderError
from identity.domain.error import (
    AudienceNotFoundError,
    ClaimMissingError,
    ConflictError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ProviderNotSupportedError,
    VerificationError,
)
from identity.util.jwt import JWTError


class InterfaceError(Exception):
    """Base interface error."""

    pass


class AuthenticationError(InterfaceError):
    """Raised when a request carries no usable session token."""

    pass


# Most specific first; the first matching class wins
ERROR_STATUS_CODES: list[tuple[type[Exception], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ProviderNotSupportedError, status.HTTP_400_BAD_REQUEST),
    (AudienceNotFoundError, status.HTTP_400_BAD_REQUEST),
    (ClaimMissingError, status.HTTP_400_BAD_REQUEST),
    (InvalidStateError, status.HTTP_400_BAD_REQUEST),
    (VerificationError, status.HTTP_401_UNAUTHORIZED),
    (JWTError, status.HTTP_401_UNAUTHORIZED),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (ProviderError, status.HTTP_502_BAD_GATEWAY),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
]


def status_code_for(error: Exception) -> int:
    """Map an exception to its HTTP status code (500 if unmapped)."""
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Render a mapped exception as ``{"detail": ...}``."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logfire.error(
            "Request failed",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
    else:
        logfire.info(
            "Request rejected",
            path=request.url.path,
            status_code=status_code,
            error=str(exc),
        )

    if isinstance(exc, ValidationError):
        detail = exc.errors(include_url=False, include_context=False)
        return JSONResponse(status_code=status_code, content={"detail": detail})
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    """Register handlers for domain, adapter and token errors.

    Args:
        app: FastAPI application
    """
    for error_type in (
        DomainError,
        ProviderError,
        JWTError,
        InterfaceError,
        ValidationError,
    ):
        app.add_exception_handler(error_type, handle_error)
