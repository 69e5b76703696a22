"""Response schemas for transaction audit endpoints."""

from datetime import datetime

from pydantic import BaseModel

from rolegate.schemas.roles import RoleResponse
from rolegate.schemas.users import UserResponse


class AuditTrailResponse(BaseModel):
    """Rows last written under one transaction ID."""

    transaction_id: str
    users: list[UserResponse]
    roles: list[RoleResponse]


class TransactionStatistics(BaseModel):
    total_users: int
    users_with_transaction_id: int
    unique_transaction_ids: int
    total_roles: int
    current_transaction_id: str
    calculation_timestamp: datetime


class TransactionValidation(BaseModel):
    transaction_id: str
    is_valid: bool
    current_transaction_id: str


class CurrentTransaction(BaseModel):
    current_transaction_id: str
    timestamp: datetime
