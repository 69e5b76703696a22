"""Request/response schemas for user endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    active: bool = True

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("username must not be blank")
        return v


class UserUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    username: str | None = Field(default=None, min_length=1, max_length=255)
    password: str | None = Field(default=None, min_length=8, max_length=128)
    active: bool | None = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("username must not be blank")
        return v


class UserResponse(BaseModel):
    """User without credentials; roles lists every assigned role name."""

    id: int
    username: str
    active: bool
    transaction_id: str | None = None
    created_at: datetime | None = None
    roles: list[str] = Field(default_factory=list)

    @field_validator("roles", mode="before")
    @classmethod
    def role_names(cls, v: object) -> object:
        if isinstance(v, (list, tuple, set)):
            return [getattr(item, "name", item) for item in v]
        return v

    class Config:
        from_attributes = True
