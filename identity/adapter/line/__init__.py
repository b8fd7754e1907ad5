"""LINE identity adapter."""

from .verifier import LineVerifier, MockLineVerifier, RealLineVerifier

__all__ = ["LineVerifier", "RealLineVerifier", "MockLineVerifier"]
