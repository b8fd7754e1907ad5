"""Unit tests for the LINE ID token verifier."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from identity.adapter.error import ProviderError
from identity.adapter.line import RealLineVerifier
from identity.domain.error import VerificationError
from identity.domain.value import SocialProvider

VERIFY_URL = "https://api.line.me/oauth2/v2.1/verify"


def line_response(status_code: int, body: dict) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = body
    response.text = str(body)
    return response


class TestRealLineVerifier:
    """Tests for RealLineVerifier."""

    @pytest.mark.asyncio
    async def test_verify_success(self):
        """Claims from LINE become the verified identity."""
        # Arrange
        verifier = RealLineVerifier(verify_url=VERIFY_URL)
        claims = {
            "iss": "https://access.line.me",
            "sub": "U4af4980629",
            "aud": "1234567890",
            "nonce": "n-1",
            "name": "Lin",
            "email": "lin@example.com",
        }

        with patch("httpx.AsyncClient") as mock_client:
            mock_post = AsyncMock(return_value=line_response(200, claims))
            mock_client.return_value.__aenter__.return_value.post = mock_post

            # Act
            identity = await verifier.verify("id-token", "1234567890", nonce="n-1")

        # Assert
        assert identity.provider == SocialProvider.LINE
        assert identity.subject == "U4af4980629"
        assert identity.claim("email") == "lin@example.com"
        call = mock_post.call_args
        assert call.args[0] == VERIFY_URL
        assert call.kwargs["data"] == {
            "id_token": "id-token",
            "client_id": "1234567890",
            "nonce": "n-1",
        }

    @pytest.mark.asyncio
    async def test_nonce_omitted_when_not_given(self):
        """No nonce is sent or checked when the caller has none."""
        verifier = RealLineVerifier(verify_url=VERIFY_URL)

        with patch("httpx.AsyncClient") as mock_client:
            mock_post = AsyncMock(return_value=line_response(200, {"sub": "U1"}))
            mock_client.return_value.__aenter__.return_value.post = mock_post

            identity = await verifier.verify("id-token", "1234567890")

        assert identity.subject == "U1"
        assert "nonce" not in mock_post.call_args.kwargs["data"]

    @pytest.mark.asyncio
    async def test_nonce_mismatch(self):
        """A token carrying another nonce is a replay."""
        verifier = RealLineVerifier(verify_url=VERIFY_URL)

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=line_response(200, {"sub": "U1", "nonce": "other"})
            )

            with pytest.raises(VerificationError, match="nonce mismatch"):
                await verifier.verify("id-token", "1234567890", nonce="n-1")

    @pytest.mark.asyncio
    async def test_rejected_token(self):
        """LINE's error description is surfaced."""
        verifier = RealLineVerifier(verify_url=VERIFY_URL)
        body = {"error": "invalid_request", "error_description": "IdToken expired."}

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                return_value=line_response(400, body)
            )

            with pytest.raises(VerificationError, match="IdToken expired"):
                await verifier.verify("id-token", "1234567890")

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Transport failures are provider errors, not verification failures."""
        verifier = RealLineVerifier(verify_url=VERIFY_URL)

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.post = AsyncMock(
                side_effect=httpx.ConnectError("connection refused")
            )

            with pytest.raises(ProviderError):
                await verifier.verify("id-token", "1234567890")
