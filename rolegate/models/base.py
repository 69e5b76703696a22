"""SQLAlchemy declarative Base and shared model configuration."""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


def utc_now() -> datetime:
    """Python-side default for created_at columns, so stored values share one format."""
    return datetime.now(timezone.utc)
