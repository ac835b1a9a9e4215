"""Unit tests for password hashing and bearer tokens."""

from datetime import timedelta

import pytest
from jose import jwt

from notekeeper.backend.core.exceptions import AuthenticationError
from notekeeper.backend.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    password_too_long,
    user_id_from_token,
    verify_password,
)


class TestPasswordHashing:
    """Tests for note password hashing."""

    def test_hash_is_not_plaintext(self) -> None:
        """Should never store the password itself."""
        hashed = hash_password("abc123", rounds=4)
        assert hashed != "abc123"
        assert "abc123" not in hashed

    def test_same_password_hashes_differently(self) -> None:
        """Should salt every hash."""
        assert hash_password("abc123", rounds=4) != hash_password("abc123", rounds=4)

    def test_verify_correct_and_wrong(self) -> None:
        """Should accept the right password and reject others."""
        hashed = hash_password("abc123", rounds=4)
        assert verify_password("abc123", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_verify_without_hash_always_passes(self) -> None:
        """Should treat a missing hash as no protection."""
        assert verify_password("anything", None) is True
        assert verify_password("", None) is True

    def test_verify_malformed_hash_fails(self) -> None:
        """Should refuse rather than raise on a corrupt hash."""
        assert verify_password("abc123", "not-a-bcrypt-hash") is False

    def test_default_rounds_from_config(self) -> None:
        """Should use the configured cost factor."""
        hashed = hash_password("abc123")
        assert hashed.startswith("$2b$10$")

    def test_password_length_limit(self) -> None:
        """Should flag passwords over 72 bytes."""
        assert password_too_long("a" * 72) is False
        assert password_too_long("a" * 73) is True
        assert password_too_long("é" * 37) is True


class TestTokens:
    """Tests for JWT creation and decoding."""

    def test_round_trip(self, patched_settings) -> None:
        """Should decode the user id that was encoded."""
        token = create_access_token({"sub": "alice"})
        assert user_id_from_token(token) == "alice"

    def test_payload_fields(self, patched_settings) -> None:
        """Should mark the token as an access token for this API."""
        payload = decode_token(create_access_token({"sub": "alice"}))
        assert payload["type"] == "access"
        assert payload["aud"] == "notekeeper-api"
        assert "exp" in payload

    def test_expired_token_rejected(self, patched_settings) -> None:
        """Should reject a token past its expiry."""
        token = create_access_token({"sub": "alice"}, expires_delta=timedelta(minutes=-5))
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_wrong_secret_rejected(self, patched_settings) -> None:
        """Should reject a token signed with another key."""
        token = jwt.encode(
            {"sub": "alice", "type": "access", "aud": "notekeeper-api"},
            "some-other-secret",
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_token_without_subject_rejected(self, patched_settings) -> None:
        """Should require a user id."""
        token = create_access_token({})
        with pytest.raises(AuthenticationError, match="does not identify"):
            user_id_from_token(token)

    def test_missing_secret_rejected(self, test_settings, patched_settings) -> None:
        """Should refuse to decode when no secret is configured."""
        token = create_access_token({"sub": "alice"})
        test_settings.jwt_secret = ""
        with pytest.raises(AuthenticationError, match="not configured"):
            decode_token(token)
