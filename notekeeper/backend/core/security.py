"""
Security Utilities.

Note password hashing (bcrypt) and bearer token handling (JWT).
"""

from datetime import timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from notekeeper.backend.core.config import get_app_config, get_settings
from notekeeper.backend.core.exceptions import AuthenticationError
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.core.utils import utc_now

logger = get_logger(__name__)


def hash_password(password: str, rounds: int | None = None) -> str:
    """
    Hash a note password using bcrypt.

    Args:
        password: Plaintext password, never logged
        rounds: bcrypt cost factor. Defaults to security.yaml password.bcrypt_rounds.
    """
    if rounds is None:
        rounds = get_app_config().security.password.bcrypt_rounds
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """
    Verify a password against its hash.

    A missing hash means the note is not protected, so any
    candidate verifies.
    """
    if not hashed_password:
        return True
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def password_too_long(password: str) -> bool:
    """bcrypt only considers the first max_bytes bytes of a password."""
    max_bytes = get_app_config().security.password.max_bytes
    return len(password.encode("utf-8")) > max_bytes


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode, ``sub`` carries the user id
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    to_encode = data.copy()

    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode.update({"exp": expire, "type": "access", "aud": jwt_config.audience})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    if not settings.jwt_secret:
        raise AuthenticationError("Token authentication is not configured")
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", error=str(e))
        raise AuthenticationError("Invalid or expired token")


def user_id_from_token(token: str) -> str:
    """Return the ``sub`` claim of a valid access token."""
    payload = decode_token(token)
    subject = payload.get("sub")
    if payload.get("type") != "access" or not subject:
        raise AuthenticationError("Token does not identify a user")
    return str(subject)
