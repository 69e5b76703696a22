"""Public auth endpoints: login, register, refresh, health."""

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rolegate.core.database import check_db_connected, get_db
from rolegate.core.exceptions import InvalidRequestError
from rolegate.core.transaction import get_transaction_id
from rolegate.schemas.auth import AuthHealthResponse, AuthRequest, AuthResponse, RefreshRequest
from rolegate.services import auth as auth_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=AuthResponse)
def login(
    body: AuthRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with username and password; returns access and refresh tokens.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    logger.info("Received login request for user %s", body.username)
    return auth_service.authenticate(db, body)


@router.post("/register", response_model=AuthResponse)
def register(
    body: AuthRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Create an account and return tokens for it."""
    logger.info("Received registration request for user %s", body.username)
    return auth_service.register(db, body)


@router.post("/refresh", response_model=AuthResponse)
def refresh(
    body: RefreshRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """Exchange a refresh token for a new access/refresh pair."""
    if body.refresh_token is None or not body.refresh_token.strip():
        logger.warning("Refresh token is missing")
        raise InvalidRequestError("Refresh token is required")
    return auth_service.refresh(db, body.refresh_token.strip())


@router.get("/health", response_model=AuthHealthResponse)
def health(db: Annotated[Session, Depends(get_db)]) -> AuthHealthResponse:
    """
    Return authentication service status and database connectivity.
    Used by load balancers and monitoring.
    """
    return AuthHealthResponse(
        transaction_id=get_transaction_id(),
        timestamp=datetime.now(timezone.utc),
        database="connected" if check_db_connected(db) else "disconnected",
    )
