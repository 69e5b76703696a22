"""Audit queries over the transaction IDs stamped on users and roles."""

import logging
from collections import defaultdict
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from rolegate.core.exceptions import InvalidRequestError
from rolegate.core.transaction import get_transaction_id, is_valid_transaction_id
from rolegate.models import Role, User
from rolegate.repositories import roles as role_repo
from rolegate.repositories import users as user_repo
from rolegate.schemas.transactions import TransactionStatistics

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_audit_trail(db: Session, transaction_id: str) -> tuple[list[User], list[Role]]:
    """Users and roles whose last write happened under transaction_id."""
    users = user_repo.list_by_transaction_id(db, transaction_id)
    roles = role_repo.list_by_transaction_id(db, transaction_id)
    logger.info(
        "Found %s users and %s roles for transaction %s",
        len(users),
        len(roles),
        transaction_id,
    )
    return users, roles


def get_transactions_by_date_range(
    db: Session, start: datetime, end: datetime
) -> dict[str, list[User]]:
    """Users created in [start, end], grouped by transaction ID. Unstamped users are skipped."""
    start, end = _as_utc(start), _as_utc(end)
    if start > end:
        raise InvalidRequestError("start_date must not be after end_date")
    grouped: dict[str, list[User]] = defaultdict(list)
    for user in user_repo.list_created_between(db, start, end):
        if user.transaction_id:
            grouped[user.transaction_id].append(user)
    logger.info("Found %s transactions between %s and %s", len(grouped), start, end)
    return dict(grouped)


def get_statistics(db: Session) -> TransactionStatistics:
    return TransactionStatistics(
        total_users=user_repo.count_all(db),
        users_with_transaction_id=user_repo.count_with_transaction_id(db),
        unique_transaction_ids=user_repo.count_distinct_transaction_ids(db),
        total_roles=role_repo.count_all(db),
        current_transaction_id=get_transaction_id(),
        calculation_timestamp=datetime.now(timezone.utc),
    )


def validate_transaction_id(transaction_id: str | None) -> bool:
    valid = is_valid_transaction_id(transaction_id)
    logger.debug("Transaction ID %r valid: %s", transaction_id, valid)
    return valid


def get_recent_transactions(db: Session, limit: int = 10) -> list[User]:
    """Most recently created users that carry a transaction ID, newest first."""
    users = user_repo.list_recent_with_transaction_id(db, limit)
    logger.info("Retrieved %s recent transactions", len(users))
    return users
