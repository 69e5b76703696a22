"""User CRUD. Every write stamps the current transaction ID on the row."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rolegate.core.exceptions import DuplicateError, NotFoundError
from rolegate.core.security import hash_password
from rolegate.core.transaction import get_transaction_id
from rolegate.models import User
from rolegate.repositories import users as user_repo
from rolegate.schemas.users import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def commit_unique(db: Session, message: str) -> None:
    """Commit; a unique-constraint violation raced past the pre-check becomes DuplicateError."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateError(message) from e


def create_user(db: Session, data: UserCreate) -> User:
    logger.info("Creating user %s", data.username)
    if user_repo.exists_by_username(db, data.username):
        logger.warning("Username already exists: %s", data.username)
        raise DuplicateError(f"Username already exists: {data.username}")

    user = User(
        username=data.username,
        password_hash=hash_password(data.password),
        active=data.active,
        transaction_id=get_transaction_id(),
    )
    db.add(user)
    commit_unique(db, f"Username already exists: {data.username}")
    db.refresh(user)
    logger.info("User created with id %s", user.id)
    return user


def get_user(db: Session, user_id: int) -> User | None:
    user = user_repo.get_by_id(db, user_id)
    if user is None:
        logger.warning("User not found with id %s", user_id)
    return user


def get_user_by_username(db: Session, username: str) -> User | None:
    user = user_repo.get_by_username(db, username)
    if user is None:
        logger.warning("User not found with username %s", username)
    return user


def require_user(db: Session, user_id: int) -> User:
    user = user_repo.get_by_id(db, user_id)
    if user is None:
        logger.error("User not found with id %s", user_id)
        raise NotFoundError(f"User not found with id: {user_id}")
    return user


def list_users(db: Session, active: bool | None = None) -> list[User]:
    if active is None:
        users = user_repo.list_all(db)
    else:
        users = user_repo.list_by_active(db, active)
    logger.info("Found %s users", len(users))
    return users


def update_user(db: Session, user_id: int, data: UserUpdate) -> User:
    logger.info("Updating user with id %s", user_id)
    user = require_user(db, user_id)

    if data.username is not None and data.username != user.username:
        if user_repo.exists_by_username(db, data.username):
            logger.warning("Username already exists: %s", data.username)
            raise DuplicateError(f"Username already exists: {data.username}")
        user.username = data.username
    if data.password is not None:
        user.password_hash = hash_password(data.password)
    if data.active is not None:
        user.active = data.active

    user.transaction_id = get_transaction_id()
    commit_unique(db, f"Username already exists: {user.username}")
    db.refresh(user)
    logger.info("User updated with id %s", user.id)
    return user


def delete_user(db: Session, user_id: int) -> None:
    logger.info("Deleting user with id %s", user_id)
    user = require_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User deleted with id %s", user_id)


def username_exists(db: Session, username: str) -> bool:
    exists = user_repo.exists_by_username(db, username)
    logger.debug("Username %r exists: %s", username, exists)
    return exists
