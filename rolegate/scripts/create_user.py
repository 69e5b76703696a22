"""
Create a user (e.g. first admin) with optional roles. Run from project root:
  python -m rolegate.scripts.create_user USERNAME PASSWORD [ROLE ...]
Example:
  python -m rolegate.scripts.create_user admin your-secure-password ADMIN USER
Missing roles are created. All rows are stamped with one generated transaction ID.
"""
import argparse
import logging
import sys

from rolegate.core.config import settings
from rolegate.core.database import SessionLocal
from rolegate.core.exceptions import ServiceError
from rolegate.core.logs import configure_logging
from rolegate.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from rolegate.core.transaction import transaction_scope
from rolegate.schemas.roles import RoleCreate
from rolegate.schemas.users import UserCreate
from rolegate.services import roles as role_service
from rolegate.services import users as user_service

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Rolegate user with roles.")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("roles", nargs="*", default=[], help="Role names to assign")
    args = parser.parse_args(argv)
    configure_logging(settings.LOG_LEVEL)

    username = args.username.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        with transaction_scope() as transaction_id:
            user = user_service.create_user(
                db, UserCreate(username=username, password=args.password)
            )
            existing = {r.name for r in role_service.list_roles_by_names(db, args.roles)}
            for name in args.roles:
                if name not in existing:
                    role_service.create_role(db, RoleCreate(name=name))
                    existing.add(name)
            if args.roles:
                user = role_service.assign_roles_to_user(db, user.id, args.roles)
            print(
                f"Created user '{user.username}' with roles {user.active_role_names} "
                f"(transaction {transaction_id})."
            )
        return 0
    except ServiceError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
