"""Core app configuration, database and security."""

from mashebi.core.config import get_settings, settings
from mashebi.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
