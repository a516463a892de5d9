"""Pydantic result schemas."""

from credstore.schemas.account import (
    AccountPublic,
    AccountRef,
    CreatedAccount,
    LoginResult,
    VerificationIssue,
    VerifiedAccount,
)

__all__ = [
    "AccountPublic",
    "AccountRef",
    "CreatedAccount",
    "LoginResult",
    "VerificationIssue",
    "VerifiedAccount",
]
