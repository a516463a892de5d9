"""Result schemas returned by account operations."""

from typing import Any

from pydantic import BaseModel, Field


class CreatedAccount(BaseModel):
    """A newly inserted account; the token is returned once so the caller can deliver it."""

    id: int
    username: str
    verification_token: str | None = Field(
        default=None, description="Null when the account was created verified"
    )


class AccountPublic(BaseModel):
    """Public projection of an account: no password material, no token."""

    id: int
    username: str
    email: str
    verified: bool
    level: int
    created: int
    updated: int
    lastlogin: int | None = None
    data: Any = Field(default_factory=dict, description="Deserialized caller data blob")


class LoginResult(BaseModel):
    """Successful login; lastlogin is the previous login time, not the one just recorded."""

    id: int
    username: str
    level: int
    lastlogin: int | None = None


class VerifiedAccount(BaseModel):
    """Identity of an account that just completed verification."""

    id: int
    username: str
    level: int
    lastlogin: int | None = None


class VerificationIssue(BaseModel):
    """A freshly issued verification token and where to deliver it."""

    id: int
    username: str
    email: str
    verification_token: str


class AccountRef(BaseModel):
    """Minimal account reference (id, username)."""

    id: int
    username: str

    class Config:
        from_attributes = True
