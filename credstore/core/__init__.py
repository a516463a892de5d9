"""Core store configuration, database and credential hashing."""

from credstore.core.config import get_settings, settings
from credstore.core.database import SessionLocal, get_db, init_db

__all__ = ["get_settings", "settings", "get_db", "init_db", "SessionLocal"]
