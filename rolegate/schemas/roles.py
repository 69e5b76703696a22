"""Request/response schemas for role endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    active: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("role name must not be blank")
        return v


class RoleUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    active: bool | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("role name must not be blank")
        return v


class RoleResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    active: bool
    transaction_id: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class RoleUserCount(BaseModel):
    """Response for GET /roles/name/{role_name}/count."""

    role_name: str
    user_count: int
    transaction_id: str
