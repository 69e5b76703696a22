"""ORM model for roles and the user/role association table."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    func,
    true,
)
from sqlalchemy.orm import relationship

from rolegate.core.transaction import MAX_TRANSACTION_ID_LENGTH
from rolegate.models.base import Base, utc_now

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Named role; only active roles contribute to a user's authorities."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True, server_default=true())
    transaction_id = Column(String(MAX_TRANSACTION_ID_LENGTH), nullable=True, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    users = relationship(
        "User",
        secondary=user_roles,
        back_populates="roles",
        order_by="User.id",
    )
