"""SQLAlchemy ORM models."""

from rolegate.models.base import Base
from rolegate.models.profile import Address, Profile
from rolegate.models.role import Role, user_roles
from rolegate.models.user import User

__all__ = ["Address", "Base", "Profile", "Role", "User", "user_roles"]
