"""Embedded credential store: accounts, password hashing, verification tokens."""

from credstore.core.config import Settings, get_settings
from credstore.core.database import SessionLocal, get_db, init_db
from credstore.core.exceptions import (
    AuthenticationError,
    ConflictError,
    CredstoreError,
    NotFoundError,
    SerializationError,
    ValidationError,
)
from credstore.models import Account, Base
from credstore.schemas import (
    AccountPublic,
    AccountRef,
    CreatedAccount,
    LoginResult,
    VerificationIssue,
    VerifiedAccount,
)
from credstore.services.accounts import (
    change_password,
    check_username,
    create_account,
    delete_account,
    get_account,
    login,
    reissue_verification,
    reset_verification,
    update_data,
    verify_account,
)

__version__ = "0.1.0"

__all__ = [
    "Account",
    "AccountPublic",
    "AccountRef",
    "AuthenticationError",
    "Base",
    "ConflictError",
    "CreatedAccount",
    "CredstoreError",
    "LoginResult",
    "NotFoundError",
    "SerializationError",
    "SessionLocal",
    "Settings",
    "ValidationError",
    "VerificationIssue",
    "VerifiedAccount",
    "change_password",
    "check_username",
    "create_account",
    "delete_account",
    "get_account",
    "get_db",
    "get_settings",
    "init_db",
    "login",
    "reissue_verification",
    "reset_verification",
    "update_data",
    "verify_account",
]
