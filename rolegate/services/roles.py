"""Role CRUD and user/role assignment."""

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from rolegate.core.exceptions import DuplicateError, NotFoundError
from rolegate.core.transaction import get_transaction_id
from rolegate.models import Role, User
from rolegate.repositories import roles as role_repo
from rolegate.repositories import users as user_repo
from rolegate.schemas.roles import RoleCreate, RoleUpdate
from rolegate.services.users import commit_unique, require_user

logger = logging.getLogger(__name__)


def _unique_names(names: Iterable[str]) -> list[str]:
    """Strip and de-duplicate, keeping first-seen order; blanks are dropped."""
    seen: dict[str, None] = {}
    for name in names:
        name = name.strip()
        if name:
            seen.setdefault(name, None)
    return list(seen)


def create_role(db: Session, data: RoleCreate) -> Role:
    logger.info("Creating role %s", data.name)
    if role_repo.exists_by_name(db, data.name):
        logger.warning("Role already exists with name %s", data.name)
        raise DuplicateError(f"Role already exists with name: {data.name}")

    role = Role(
        name=data.name,
        description=data.description,
        active=data.active,
        transaction_id=get_transaction_id(),
    )
    db.add(role)
    commit_unique(db, f"Role already exists with name: {data.name}")
    db.refresh(role)
    logger.info("Role created with id %s", role.id)
    return role


def get_role(db: Session, role_id: int) -> Role | None:
    role = role_repo.get_by_id(db, role_id)
    if role is None:
        logger.warning("Role not found with id %s", role_id)
    return role


def get_role_by_name(db: Session, name: str) -> Role | None:
    role = role_repo.get_by_name(db, name)
    if role is None:
        logger.warning("Role not found with name %s", name)
    return role


def _require_role(db: Session, role_id: int) -> Role:
    role = role_repo.get_by_id(db, role_id)
    if role is None:
        logger.error("Role not found with id %s", role_id)
        raise NotFoundError(f"Role not found with id: {role_id}")
    return role


def list_roles(db: Session) -> list[Role]:
    roles = role_repo.list_all(db)
    logger.info("Found %s roles", len(roles))
    return roles


def list_active_roles(db: Session) -> list[Role]:
    roles = role_repo.list_active(db)
    logger.info("Found %s active roles", len(roles))
    return roles


def list_roles_by_names(db: Session, names: Iterable[str]) -> list[Role]:
    return role_repo.list_by_names(db, _unique_names(names))


def update_role(db: Session, role_id: int, data: RoleUpdate) -> Role:
    logger.info("Updating role with id %s", role_id)
    role = _require_role(db, role_id)

    if data.name is not None and data.name != role.name:
        if role_repo.exists_by_name(db, data.name):
            logger.warning("Role already exists with name %s", data.name)
            raise DuplicateError(f"Role already exists with name: {data.name}")
        role.name = data.name
    if "description" in data.model_fields_set:
        role.description = data.description
    if data.active is not None:
        role.active = data.active

    role.transaction_id = get_transaction_id()
    commit_unique(db, f"Role already exists with name: {role.name}")
    db.refresh(role)
    logger.info("Role updated with id %s", role.id)
    return role


def delete_role(db: Session, role_id: int) -> None:
    logger.info("Deleting role with id %s", role_id)
    role = _require_role(db, role_id)
    db.delete(role)
    db.commit()
    logger.info("Role deleted with id %s", role_id)


def role_name_exists(db: Session, name: str) -> bool:
    exists = role_repo.exists_by_name(db, name)
    logger.debug("Role %r exists: %s", name, exists)
    return exists


def assign_roles_to_user(db: Session, user_id: int, role_names: Iterable[str]) -> User:
    """Add the named roles to the user. Every name must exist; nothing changes otherwise."""
    names = _unique_names(role_names)
    logger.info("Assigning roles %s to user id %s", names, user_id)
    user = require_user(db, user_id)

    roles = role_repo.list_by_names(db, names)
    found = {role.name for role in roles}
    missing = sorted(name for name in names if name not in found)
    if missing:
        logger.warning("Roles not found: %s", missing)
        raise NotFoundError(f"Roles not found: {', '.join(missing)}")

    for role in roles:
        user.add_role(role)
    user.transaction_id = get_transaction_id()
    db.commit()
    db.refresh(user)
    logger.info("Roles assigned to user id %s", user_id)
    return user


def remove_roles_from_user(db: Session, user_id: int, role_names: Iterable[str]) -> User:
    """Remove the named roles from the user; unknown names are ignored."""
    names = _unique_names(role_names)
    logger.info("Removing roles %s from user id %s", names, user_id)
    user = require_user(db, user_id)

    for role in role_repo.list_by_names(db, names):
        user.remove_role(role)
    user.transaction_id = get_transaction_id()
    db.commit()
    db.refresh(user)
    logger.info("Roles removed from user id %s", user_id)
    return user


def get_user_roles(db: Session, user_id: int) -> list[Role]:
    roles = role_repo.list_active_by_user_id(db, user_id)
    logger.info("Found %s active roles for user id %s", len(roles), user_id)
    return roles


def get_user_role_names(db: Session, user_id: int) -> list[str]:
    return role_repo.names_active_by_user_id(db, user_id)


def user_has_role(db: Session, user_id: int, role_name: str) -> bool:
    has_role = user_repo.has_role(db, user_id, role_name)
    logger.debug("User id %s has role %r: %s", user_id, role_name, has_role)
    return has_role


def list_users_by_role_name(db: Session, role_name: str) -> list[User]:
    users = user_repo.list_by_role_name(db, role_name)
    logger.info("Found %s users with role %s", len(users), role_name)
    return users


def count_users_by_role_name(db: Session, role_name: str) -> int:
    return role_repo.count_users_by_role_name(db, role_name)
