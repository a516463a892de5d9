"""SQLAlchemy ORM models."""

from credstore.models.account import Account
from credstore.models.base import Base

__all__ = ["Account", "Base"]
