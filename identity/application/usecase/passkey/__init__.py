"""Passkey use cases."""

from .login import (
    FinalizePasskeyLoginRequest,
    FinalizePasskeyLoginResponse,
    FinalizePasskeyLoginUseCase,
    InitializePasskeyLoginRequest,
    InitializePasskeyLoginResponse,
    InitializePasskeyLoginUseCase,
)
from .registration import (
    FinalizePasskeyRegistrationRequest,
    FinalizePasskeyRegistrationResponse,
    FinalizePasskeyRegistrationUseCase,
    InitializePasskeyRegistrationRequest,
    InitializePasskeyRegistrationResponse,
    InitializePasskeyRegistrationUseCase,
)

__all__ = [
    "FinalizePasskeyLoginRequest",
    "FinalizePasskeyLoginResponse",
    "FinalizePasskeyLoginUseCase",
    "FinalizePasskeyRegistrationRequest",
    "FinalizePasskeyRegistrationResponse",
    "FinalizePasskeyRegistrationUseCase",
    "InitializePasskeyLoginRequest",
    "InitializePasskeyLoginResponse",
    "InitializePasskeyLoginUseCase",
    "InitializePasskeyRegistrationRequest",
    "InitializePasskeyRegistrationResponse",
    "InitializePasskeyRegistrationUseCase",
]
