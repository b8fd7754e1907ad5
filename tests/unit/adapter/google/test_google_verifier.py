"""Unit tests for the Google ID token verifier."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from identity.adapter.google import MockGoogleVerifier, RealGoogleVerifier
from identity.domain.error import VerificationError
from identity.domain.value import SocialProvider

CLIENT_ID = "client-123.apps.googleusercontent.com"
ISSUERS = ["accounts.google.com", "https://accounts.google.com"]


@pytest.fixture(scope="module")
def signing_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def verifier(signing_key) -> RealGoogleVerifier:
    """Verifier whose JWKS client hands out the test key."""
    verifier = RealGoogleVerifier(
        jwks_url="https://www.googleapis.com/oauth2/v3/certs", issuers=ISSUERS
    )
    verifier.jwks_client = MagicMock()
    verifier.jwks_client.get_signing_key_from_jwt.return_value = MagicMock(
        key=signing_key.public_key()
    )
    return verifier


def google_token(signing_key, **overrides) -> str:
    claims = {
        "iss": "https://accounts.google.com",
        "sub": "110169484474386276334",
        "aud": CLIENT_ID,
        "email": "mirror@gmail.com",
        "name": "Mirror",
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    claims.update(overrides)
    return jwt.encode(claims, signing_key, algorithm="RS256")


class TestRealGoogleVerifier:
    """Tests for RealGoogleVerifier."""

    @pytest.mark.asyncio
    async def test_verify_success(self, verifier, signing_key):
        """A well-formed token yields its subject and claims."""
        identity = await verifier.verify(google_token(signing_key), CLIENT_ID)

        assert identity.provider == SocialProvider.GOOGLE
        assert identity.subject == "110169484474386276334"
        assert identity.claim("email") == "mirror@gmail.com"

    @pytest.mark.asyncio
    async def test_wrong_audience(self, verifier, signing_key):
        """Tokens minted for another client are rejected."""
        token = google_token(signing_key, aud="someone-else")

        with pytest.raises(VerificationError):
            await verifier.verify(token, CLIENT_ID)

    @pytest.mark.asyncio
    async def test_expired(self, verifier, signing_key):
        token = google_token(
            signing_key, exp=datetime.now(timezone.utc) - timedelta(minutes=5)
        )

        with pytest.raises(VerificationError, match="expired"):
            await verifier.verify(token, CLIENT_ID)

    @pytest.mark.asyncio
    async def test_unknown_issuer(self, verifier, signing_key):
        token = google_token(signing_key, iss="https://evil.example.com")

        with pytest.raises(VerificationError, match="invalid issuer"):
            await verifier.verify(token, CLIENT_ID)

    @pytest.mark.asyncio
    async def test_tampered_signature(self, verifier):
        """Tokens signed by another key are rejected."""
        other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

        with pytest.raises(VerificationError):
            await verifier.verify(google_token(other_key), CLIENT_ID)


class TestMockGoogleVerifier:
    """Tests for MockGoogleVerifier."""

    @pytest.mark.asyncio
    async def test_credential_is_subject(self):
        identity = await MockGoogleVerifier().verify("g-1", CLIENT_ID)

        assert identity.subject == "g-1"
        assert identity.claim("email") == "g-1@gmail.com"

    @pytest.mark.asyncio
    async def test_invalid_credential(self):
        with pytest.raises(VerificationError):
            await MockGoogleVerifier().verify("invalid", CLIENT_ID)
