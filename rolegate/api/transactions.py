"""Transaction audit endpoints (access token required)."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from rolegate.api.deps import get_current_user
from rolegate.core.database import get_db
from rolegate.core.transaction import get_transaction_id
from rolegate.schemas.roles import RoleResponse
from rolegate.schemas.transactions import (
    AuditTrailResponse,
    CurrentTransaction,
    TransactionStatistics,
    TransactionValidation,
)
from rolegate.schemas.users import UserResponse
from rolegate.services import transaction_audit

router = APIRouter(dependencies=[Depends(get_current_user)])

DbSession = Annotated[Session, Depends(get_db)]

MAX_RECENT_LIMIT = 1000


@router.get("/audit/{transaction_id}", response_model=AuditTrailResponse)
def get_audit_trail(transaction_id: str, db: DbSession) -> AuditTrailResponse:
    """Users and roles last written under the given transaction ID."""
    users, roles = transaction_audit.get_audit_trail(db, transaction_id)
    return AuditTrailResponse(
        transaction_id=transaction_id,
        users=[UserResponse.model_validate(u) for u in users],
        roles=[RoleResponse.model_validate(r) for r in roles],
    )


@router.get("/by-date-range", response_model=dict[str, list[UserResponse]])
def get_transactions_by_date_range(
    db: DbSession,
    start_date: Annotated[datetime, Query(description="ISO 8601; naive values are UTC")],
    end_date: Annotated[datetime, Query(description="ISO 8601; naive values are UTC")],
) -> dict[str, list[UserResponse]]:
    """Users created in the inclusive range, keyed by transaction ID."""
    grouped = transaction_audit.get_transactions_by_date_range(db, start_date, end_date)
    return {
        transaction_id: [UserResponse.model_validate(u) for u in users]
        for transaction_id, users in grouped.items()
    }


@router.get("/statistics", response_model=TransactionStatistics)
def get_statistics(db: DbSession) -> TransactionStatistics:
    return transaction_audit.get_statistics(db)


@router.get("/validate/{transaction_id}", response_model=TransactionValidation)
def validate_transaction_id(transaction_id: str) -> TransactionValidation:
    return TransactionValidation(
        transaction_id=transaction_id,
        is_valid=transaction_audit.validate_transaction_id(transaction_id),
        current_transaction_id=get_transaction_id(),
    )


@router.get("/recent", response_model=list[UserResponse])
def get_recent_transactions(
    db: DbSession,
    limit: Annotated[int, Query(ge=1, le=MAX_RECENT_LIMIT)] = 10,
) -> list[UserResponse]:
    users = transaction_audit.get_recent_transactions(db, limit)
    return [UserResponse.model_validate(u) for u in users]


@router.get("/current", response_model=CurrentTransaction)
def get_current_transaction() -> CurrentTransaction:
    return CurrentTransaction(
        current_transaction_id=get_transaction_id(),
        timestamp=datetime.now(timezone.utc),
    )
