"""Pydantic request/response schemas."""

from rolegate.schemas.auth import (
    AuthHealthResponse,
    AuthRequest,
    AuthResponse,
    CurrentUser,
    RefreshRequest,
)
from rolegate.schemas.errors import ErrorResponse
from rolegate.schemas.roles import RoleCreate, RoleResponse, RoleUpdate, RoleUserCount
from rolegate.schemas.transactions import (
    AuditTrailResponse,
    CurrentTransaction,
    TransactionStatistics,
    TransactionValidation,
)
from rolegate.schemas.users import UserCreate, UserResponse, UserUpdate

__all__ = [
    "AuditTrailResponse",
    "AuthHealthResponse",
    "AuthRequest",
    "AuthResponse",
    "CurrentTransaction",
    "CurrentUser",
    "ErrorResponse",
    "RefreshRequest",
    "RoleCreate",
    "RoleResponse",
    "RoleUpdate",
    "RoleUserCount",
    "TransactionStatistics",
    "TransactionValidation",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
]
