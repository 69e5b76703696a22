"""Login, registration and token refresh. Every response carries the request's transaction ID."""

import logging

import jwt
from sqlalchemy.orm import Session

from rolegate.core.exceptions import AuthenticationError, DuplicateError
from rolegate.core.security import (
    access_token_lifetime,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    is_refresh_token,
    refresh_token_lifetime,
    verify_password,
)
from rolegate.core.transaction import get_transaction_id
from rolegate.models import User
from rolegate.repositories import users as user_repo
from rolegate.schemas.auth import AuthRequest, AuthResponse
from rolegate.services.users import commit_unique

logger = logging.getLogger(__name__)

AUTHORITY_PREFIX = "ROLE_"
DEFAULT_ROLE = "USER"


def effective_roles(user: User) -> list[str]:
    """Names of the user's active roles; USER when there are none."""
    return user.active_role_names or [DEFAULT_ROLE]


def effective_authorities(user: User) -> list[str]:
    return [AUTHORITY_PREFIX + name for name in effective_roles(user)]


def _issue_tokens(user: User) -> AuthResponse:
    return AuthResponse(
        access_token=create_access_token(user.username, effective_authorities(user)),
        refresh_token=create_refresh_token(user.username),
        expires_in=int(access_token_lifetime().total_seconds()),
        refresh_expires_in=int(refresh_token_lifetime().total_seconds()),
        username=user.username,
        roles=effective_roles(user),
        transaction_id=get_transaction_id(),
    )


def authenticate(db: Session, credentials: AuthRequest) -> AuthResponse:
    """Check username/password and issue an access + refresh token pair."""
    logger.info("Authenticating user %s", credentials.username)
    user = user_repo.get_by_username(db, credentials.username)
    if user is None or not verify_password(credentials.password, user.password_hash):
        logger.warning("Authentication failed for user %s", credentials.username)
        raise AuthenticationError("Invalid username or password")
    if not user.active:
        logger.warning("Inactive user attempted to authenticate: %s", credentials.username)
        raise AuthenticationError("User is inactive")

    response = _issue_tokens(user)
    logger.info("Authentication successful for user %s", user.username)
    return response


def register(db: Session, credentials: AuthRequest) -> AuthResponse:
    """Create an active user without roles and log them in."""
    username = credentials.username
    logger.info("Registering new user %s", username)
    if user_repo.exists_by_username(db, username):
        logger.warning("User already exists: %s", username)
        raise DuplicateError("Username already exists")

    user = User(
        username=username,
        password_hash=hash_password(credentials.password),
        active=True,
        transaction_id=get_transaction_id(),
    )
    db.add(user)
    commit_unique(db, "Username already exists")
    db.refresh(user)

    response = _issue_tokens(user)
    logger.info("User registration successful: %s", user.username)
    return response


def refresh(db: Session, refresh_token: str) -> AuthResponse:
    """Exchange a valid refresh token for a new token pair."""
    logger.info("Refreshing token")
    if not is_refresh_token(refresh_token):
        logger.warning("Invalid refresh token provided")
        raise AuthenticationError("Invalid refresh token")
    try:
        username = decode_token(refresh_token)["sub"]
    except jwt.PyJWTError as e:
        raise AuthenticationError("Invalid refresh token") from e

    user = user_repo.get_by_username(db, username)
    if user is None:
        logger.warning("Refresh token for unknown user %s", username)
        raise AuthenticationError(f"User not found: {username}")
    if not user.active:
        logger.warning("Inactive user attempted to refresh token: %s", username)
        raise AuthenticationError("User is inactive")

    response = _issue_tokens(user)
    logger.info("Token refresh successful for user %s", username)
    return response
