"""Authentication dependency: bearer token → CurrentUser."""

import logging
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from rolegate.core.database import get_db
from rolegate.core.security import (
    CLAIM_TRANSACTION_ID,
    CLAIM_TYPE,
    REFRESH_TOKEN_TYPE,
    decode_token,
    validate_token,
)
from rolegate.repositories import users as user_repo
from rolegate.schemas.auth import CurrentUser
from rolegate.services.auth import effective_authorities

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require a valid Bearer access token and return the current user. Raises 401 otherwise."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    token = credentials.credentials
    try:
        payload = decode_token(token)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    if payload.get(CLAIM_TYPE) == REFRESH_TOKEN_TYPE:
        logger.warning("Refresh token presented as access token for %s", payload.get("sub"))
        raise _unauthorized("Access token required")

    username = payload.get("sub")
    if not username:
        raise _unauthorized("Invalid token payload")
    logger.debug(
        "Token for user %s issued under transaction %s",
        username,
        payload.get(CLAIM_TRANSACTION_ID),
    )

    user = user_repo.get_by_username(db, username)
    if user is None:
        raise _unauthorized("User not found")
    if not user.active:
        logger.warning("Inactive user presented a token: %s", username)
        raise _unauthorized("User is inactive")
    if not validate_token(token, user.username):
        raise _unauthorized("Invalid or expired token")

    current = CurrentUser(
        id=user.id,
        username=user.username,
        authorities=effective_authorities(user),
    )
    request.state.user = current
    logger.info("Authentication successful for user %s", username)
    return current
