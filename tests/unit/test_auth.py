"""
Unit tests for authentication.
"""

from datetime import timedelta

import pytest

from print_queue.api.auth import (
    create_access_token,
    decode_token,
    hash_password,
    require_producer_key,
    verify_password,
)
from print_queue.config import get_settings
from print_queue.exceptions import AuthorizationError


class TestAuth:
    """Tests for authentication utilities."""

    def test_create_access_token(self):
        """Test JWT token creation."""
        token = create_access_token(tenant_id=1, user_id=7, username="agent")

        assert isinstance(token, str)
        assert len(token) > 0

    def test_decode_valid_token(self):
        """Test decoding a valid token."""
        token = create_access_token(tenant_id=3, user_id=7, username="agent")

        token_data = decode_token(token)

        assert token_data.tenant_id == 3
        assert token_data.user_id == 7
        assert token_data.username == "agent"
        assert token_data.exp is not None

    def test_decode_expired_token(self):
        """Test decoding an expired token raises error."""
        token = create_access_token(tenant_id=1, expires_delta=timedelta(hours=-1))

        with pytest.raises(AuthorizationError) as exc_info:
            decode_token(token)

        assert exc_info.value.status_code == 401

    def test_decode_invalid_token(self):
        """Test decoding an invalid token raises error."""
        with pytest.raises(AuthorizationError):
            decode_token("invalid-token")

    def test_password_hashing(self):
        """Test bcrypt hashes verify only the right password."""
        hashed = hash_password("s3cret")

        assert hashed != "s3cret"
        assert verify_password("s3cret", hashed) is True
        assert verify_password("wrong", hashed) is False

    async def test_producer_key_valid(self):
        """Test the configured producer key is accepted."""
        await require_producer_key(get_settings().producer_api_key)

    @pytest.mark.parametrize("api_key", [None, "", "wrong-key"])
    async def test_producer_key_invalid(self, api_key):
        """Test missing or wrong producer keys are rejected."""
        with pytest.raises(AuthorizationError):
            await require_producer_key(api_key)
