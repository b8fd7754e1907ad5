"""Passkey provider adapter."""

from .client import (
    MockPasskeysClient,
    PasskeysClient,
    PasskeysError,
    RealPasskeysClient,
)
from .verifier import MockPasskeysVerifier, PasskeysVerifier, RealPasskeysVerifier

__all__ = [
    "MockPasskeysClient",
    "MockPasskeysVerifier",
    "PasskeysClient",
    "PasskeysError",
    "PasskeysVerifier",
    "RealPasskeysClient",
    "RealPasskeysVerifier",
]
