"""Google identity adapter."""

from .verifier import GoogleVerifier, MockGoogleVerifier, RealGoogleVerifier

__all__ = ["GoogleVerifier", "RealGoogleVerifier", "MockGoogleVerifier"]
