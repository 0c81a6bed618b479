"""Core app configuration and database."""

from smanzy.core.config import get_settings, settings
from smanzy.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
