"""Core app configuration, database, security and request context."""

from rolegate.core.config import get_settings, settings
from rolegate.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
