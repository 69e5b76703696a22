"""Queries over the users table."""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from rolegate.models import Role, User


def get_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def exists_by_username(db: Session, username: str) -> bool:
    return db.query(User.id).filter(User.username == username).first() is not None


def list_all(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def list_by_active(db: Session, active: bool) -> list[User]:
    return db.query(User).filter(User.active.is_(active)).order_by(User.id).all()


def list_by_role_name(db: Session, role_name: str) -> list[User]:
    """Users holding the named role, provided the role is active."""
    return (
        db.query(User)
        .join(User.roles)
        .filter(Role.name == role_name, Role.active.is_(True))
        .order_by(User.id)
        .all()
    )


def list_by_transaction_id(db: Session, transaction_id: str) -> list[User]:
    return (
        db.query(User)
        .filter(User.transaction_id == transaction_id)
        .order_by(User.id)
        .all()
    )


def list_created_between(db: Session, start: datetime, end: datetime) -> list[User]:
    """Users created within [start, end], inclusive."""
    return (
        db.query(User)
        .filter(User.created_at >= start, User.created_at <= end)
        .order_by(User.created_at, User.id)
        .all()
    )


def list_recent_with_transaction_id(db: Session, limit: int) -> list[User]:
    return (
        db.query(User)
        .filter(User.transaction_id.isnot(None))
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(limit)
        .all()
    )


def has_role(db: Session, user_id: int, role_name: str) -> bool:
    """True when the user holds the named role and that role is active."""
    match = (
        db.query(User.id)
        .join(User.roles)
        .filter(User.id == user_id, Role.name == role_name, Role.active.is_(True))
        .first()
    )
    return match is not None


def count_all(db: Session) -> int:
    return db.query(func.count(User.id)).scalar() or 0


def count_with_transaction_id(db: Session) -> int:
    return (
        db.query(func.count(User.id)).filter(User.transaction_id.isnot(None)).scalar() or 0
    )


def count_distinct_transaction_ids(db: Session) -> int:
    return db.query(func.count(func.distinct(User.transaction_id))).scalar() or 0
