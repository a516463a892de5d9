"""ORM model for credential records."""

from sqlalchemy import Boolean, Column, Integer, String, Text

from credstore.models.base import Base


class Account(Base):
    """
    One row per user: credentials, verification state and the caller's data blob.

    password_hash and salt are hex strings produced by credstore.core.security.
    verification_token is null once the account is verified and no reissue is pending.
    created/updated/lastlogin are integer unix timestamps (seconds).
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(64), nullable=False)
    salt = Column(String(32), nullable=False)
    verification_token = Column(String(64), nullable=True, unique=True)
    verified = Column(Boolean, nullable=False, default=False)
    level = Column(Integer, nullable=False, default=0)
    created = Column(Integer, nullable=False)
    updated = Column(Integer, nullable=False)
    lastlogin = Column(Integer, nullable=True)
    data = Column(Text, nullable=False, default="{}")
