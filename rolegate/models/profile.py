"""ORM models for demographic profiles and their postal addresses (not used by auth)."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from rolegate.models.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    firstname = Column(String(255), nullable=True)
    lastname = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(64), nullable=True)
    country_code = Column(String(8), nullable=True)

    addresses = relationship(
        "Address",
        back_populates="profile",
        cascade="all, delete-orphan",
        order_by="Address.id",
    )

    def add_address(self, address: "Address") -> None:
        self.addresses.append(address)


class Address(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(
        Integer,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    street = Column(String(512), nullable=True)
    city = Column(String(255), nullable=True)
    state = Column(String(255), nullable=True)
    postal_code = Column(String(32), nullable=True)
    country = Column(String(255), nullable=True)

    profile = relationship("Profile", back_populates="addresses")
