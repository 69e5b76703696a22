"""Password hashing and JWT issuance/verification for access and refresh tokens."""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from rolegate.core.config import settings
from rolegate.core.transaction import get_transaction_id

logger = logging.getLogger(__name__)

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# Claim names and values shared with token consumers.
CLAIM_TRANSACTION_ID = "transactionId"
CLAIM_AUTHORITIES = "authorities"
CLAIM_TYPE = "type"
REFRESH_TOKEN_TYPE = "REFRESH"


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def access_token_lifetime() -> timedelta:
    return timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def refresh_token_lifetime() -> timedelta:
    return timedelta(minutes=settings.JWT_REFRESH_EXPIRE_MINUTES)


def _encode(claims: dict[str, Any], subject: str, lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        **claims,
        "sub": subject,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def create_access_token(
    username: str,
    authorities: Iterable[str],
    expires_delta: timedelta | None = None,
) -> str:
    """Create an access token carrying the user's authorities and the current transaction ID."""
    transaction_id = get_transaction_id()
    logger.info("Generating access token for user %s", username)
    claims = {
        CLAIM_TRANSACTION_ID: transaction_id,
        CLAIM_AUTHORITIES: sorted(authorities),
    }
    return _encode(claims, username, expires_delta or access_token_lifetime())


def create_refresh_token(username: str, expires_delta: timedelta | None = None) -> str:
    """Create a refresh token: no authorities, marked with type=REFRESH."""
    transaction_id = get_transaction_id()
    logger.info("Generating refresh token for user %s", username)
    claims = {
        CLAIM_TRANSACTION_ID: transaction_id,
        CLAIM_TYPE: REFRESH_TOKEN_TYPE,
    }
    return _encode(claims, username, expires_delta or refresh_token_lifetime())


def decode_token(token: str, verify_exp: bool = True) -> dict[str, Any]:
    """
    Verify the signature (and, by default, expiry) and return the claims.
    Raises jwt.PyJWTError on invalid or expired token.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"verify_exp": verify_exp, "require": ["sub", "exp"]},
    )


def extract_username(token: str) -> str:
    """Return the token subject. Raises jwt.PyJWTError on invalid or expired token."""
    return decode_token(token)["sub"]


def extract_transaction_id(token: str) -> str | None:
    """Return the transaction ID the token was issued under, or None if unreadable."""
    try:
        value = decode_token(token).get(CLAIM_TRANSACTION_ID)
    except jwt.PyJWTError as e:
        logger.warning("Could not read transaction ID from token: %s", e)
        return None
    return value if isinstance(value, str) else None


def is_refresh_token(token: str) -> bool:
    try:
        claims = decode_token(token)
    except jwt.PyJWTError as e:
        logger.warning("Could not read token type: %s", e)
        return False
    return claims.get(CLAIM_TYPE) == REFRESH_TOKEN_TYPE


def is_token_expired(token: str) -> bool:
    """Compare exp with the wall clock; unreadable tokens count as expired."""
    try:
        claims = decode_token(token, verify_exp=False)
        expires_at = datetime.fromtimestamp(int(claims["exp"]), UTC)
    except (jwt.PyJWTError, KeyError, TypeError, ValueError) as e:
        logger.warning("Could not read token expiry: %s", e)
        return True
    return expires_at <= datetime.now(UTC)


def validate_token(token: str, username: str) -> bool:
    """True when the token is authentic, unexpired and issued to username."""
    try:
        subject = extract_username(token)
    except jwt.PyJWTError as e:
        logger.warning("Token validation failed: %s", e)
        return False
    valid = subject == username and not is_token_expired(token)
    if not valid:
        logger.warning("Token validation failed for user %s", subject)
    return valid
