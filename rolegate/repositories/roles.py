"""Queries over the roles table and the user/role association."""

from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from rolegate.models import Role, User


def get_by_id(db: Session, role_id: int) -> Role | None:
    return db.query(Role).filter(Role.id == role_id).first()


def get_by_name(db: Session, name: str) -> Role | None:
    return db.query(Role).filter(Role.name == name).first()


def exists_by_name(db: Session, name: str) -> bool:
    return db.query(Role.id).filter(Role.name == name).first() is not None


def list_all(db: Session) -> list[Role]:
    return db.query(Role).order_by(Role.id).all()


def list_active(db: Session) -> list[Role]:
    return db.query(Role).filter(Role.active.is_(True)).order_by(Role.id).all()


def list_by_names(db: Session, names: Iterable[str]) -> list[Role]:
    names = list(names)
    if not names:
        return []
    return db.query(Role).filter(Role.name.in_(names)).order_by(Role.id).all()


def list_by_transaction_id(db: Session, transaction_id: str) -> list[Role]:
    return (
        db.query(Role)
        .filter(Role.transaction_id == transaction_id)
        .order_by(Role.id)
        .all()
    )


def list_active_by_user_id(db: Session, user_id: int) -> list[Role]:
    return (
        db.query(Role)
        .join(Role.users)
        .filter(User.id == user_id, Role.active.is_(True))
        .order_by(Role.name)
        .all()
    )


def names_active_by_user_id(db: Session, user_id: int) -> list[str]:
    rows = (
        db.query(Role.name)
        .join(Role.users)
        .filter(User.id == user_id, Role.active.is_(True))
        .order_by(Role.name)
        .all()
    )
    return [name for (name,) in rows]


def count_users_by_role_name(db: Session, role_name: str) -> int:
    """Number of users holding the named role, provided the role is active."""
    return (
        db.query(func.count(User.id))
        .select_from(User)
        .join(User.roles)
        .filter(Role.name == role_name, Role.active.is_(True))
        .scalar()
        or 0
    )


def count_all(db: Session) -> int:
    return db.query(func.count(Role.id)).scalar() or 0
