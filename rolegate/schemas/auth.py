"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class AuthRequest(BaseModel):
    """Credentials for login and registration."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=8, max_length=128, description="Password")

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username must not be blank")
        return v


class RefreshRequest(BaseModel):
    """Refresh token exchanged for a new token pair."""

    refresh_token: str | None = Field(default=None, description="JWT refresh token")


class AuthResponse(BaseModel):
    """Token pair issued on login, registration and refresh."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_in: int = Field(..., description="Access token lifetime in seconds")
    refresh_expires_in: int = Field(..., description="Refresh token lifetime in seconds")
    username: str
    roles: list[str] = Field(default_factory=list, description="Active role names")
    transaction_id: str = Field(..., description="Transaction ID of the issuing request")


class CurrentUser(BaseModel):
    """Authenticated principal (id, username, authorities) for dependency injection."""

    id: int
    username: str
    authorities: list[str]


class AuthHealthResponse(BaseModel):
    """Response body for GET /auth/health."""

    status: Literal["UP"] = "UP"
    service: str = "authentication"
    transaction_id: str
    timestamp: datetime
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Database connectivity status when check is performed",
    )
