"""Core app configuration, database and error types."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.errors import BoardError

__all__ = ["BoardError", "get_settings", "settings", "get_db"]
