"""Error kinds raised by account operations."""


class CredstoreError(Exception):
    """Base class for every error an account operation reports to the caller."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class ValidationError(CredstoreError):
    """Missing or malformed input (username, email, password, identifier). Raised before any store access."""


class NotFoundError(CredstoreError):
    """No account matches the id, username, email or verification token."""


class ConflictError(CredstoreError):
    """The store rejected a write because of a uniqueness constraint."""


class AuthenticationError(CredstoreError):
    """Password or verification token does not match."""


class SerializationError(CredstoreError):
    """The data blob cannot be encoded for storage or decoded after reading."""
