"""Core app configuration and database."""

from yardtrack.core.config import get_settings, settings
from yardtrack.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
