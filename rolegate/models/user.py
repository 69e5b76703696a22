"""ORM model for application users (auth and role assignment)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func, true
from sqlalchemy.orm import relationship

from rolegate.core.transaction import MAX_TRANSACTION_ID_LENGTH
from rolegate.models.base import Base, utc_now
from rolegate.models.role import user_roles


class User(Base):
    """
    User account for JWT authentication.

    transaction_id records the request that last wrote the row.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    active = Column(Boolean, nullable=False, default=True, server_default=true())
    transaction_id = Column(String(MAX_TRANSACTION_ID_LENGTH), nullable=True, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    roles = relationship(
        "Role",
        secondary=user_roles,
        back_populates="users",
        order_by="Role.name",
    )

    @property
    def active_role_names(self) -> list[str]:
        return sorted(role.name for role in self.roles if role.active)

    def add_role(self, role) -> None:
        if role not in self.roles:
            self.roles.append(role)

    def remove_role(self, role) -> None:
        if role in self.roles:
            self.roles.remove(role)
