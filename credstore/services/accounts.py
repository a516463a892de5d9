"""
Account lifecycle: creation, lookup, login, verification, password change, deletion and data updates.

Every operation is a plain function of (session, arguments). Reads go through
credstore.services.store before any write so the current salt, token and
verification state are known; password material only passes through
credstore.core.security.
"""

import logging
import time
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from credstore.core.config import get_settings
from credstore.core.exceptions import (
    AuthenticationError,
    CredstoreError,
    NotFoundError,
    ValidationError,
)
from credstore.core.security import (
    PASSWORD_MIN_LEN,
    generate_salt,
    generate_verification_token,
    hash_password,
    password_matches,
)
from credstore.schemas.account import (
    AccountPublic,
    AccountRef,
    CreatedAccount,
    LoginResult,
    VerificationIssue,
    VerifiedAccount,
)
from credstore.services import store
from credstore.services.normalize import (
    DEFAULT_DATA,
    coerce_level,
    deserialize_data,
    is_valid_username,
    normalize_email,
    serialize_data,
    slugify_username,
)

if TYPE_CHECKING:
    from credstore.core.config import Settings

logger = logging.getLogger(__name__)


def _now() -> int:
    return int(time.time())


def _iterations(settings: "Settings | None") -> int:
    return (settings or get_settings()).HASH_ITERATIONS


def _validate_password(password: Any) -> None:
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LEN:
        raise ValidationError("no valid password specified")


def create_account(
    session: Session,
    username: str,
    email: str,
    password: str,
    level: Any = 0,
    verified: bool = False,
    data: Any = None,
    settings: "Settings | None" = None,
) -> CreatedAccount:
    """
    Validate input, hash the password with a fresh salt and insert the account.

    Unless verified is True the account starts unverified with a fresh
    verification token, which is returned so the caller can deliver it.
    Raises ValidationError before touching the store, ConflictError on a
    duplicate username or email.
    """
    if not isinstance(username, str) or username == "":
        raise ValidationError("no username specified")
    username = slugify_username(username)
    if not is_valid_username(username):
        raise ValidationError("no username specified")

    if not isinstance(email, str) or email == "":
        raise ValidationError("no email specified")
    email = normalize_email(email)

    _validate_password(password)
    level = coerce_level(level)
    serialized = DEFAULT_DATA if data is None else serialize_data(data)

    salt = generate_salt()
    if verified is True:
        token = None
    else:
        token = generate_verification_token()
    now = _now()

    account = store.insert_account(
        session,
        {
            "username": username,
            "email": email,
            "salt": salt,
            "password_hash": hash_password(username, password, salt, _iterations(settings)),
            "verification_token": token,
            "verified": token is None,
            "level": level,
            "created": now,
            "updated": now,
            "lastlogin": None,
            "data": serialized,
        },
    )
    logger.info("Account created: id=%s username=%s verified=%s", account.id, username, token is None)
    return CreatedAccount(id=account.id, username=username, verification_token=token)


def get_account(session: Session, identifier: store.Identifier) -> AccountPublic:
    """Return the public projection of an account looked up by id (int) or username (str)."""
    account = store.get_by_identifier(session, identifier)
    if account is None:
        raise NotFoundError("no such user")
    return AccountPublic(
        id=account.id,
        username=account.username,
        email=account.email,
        verified=account.verified,
        level=account.level,
        created=account.created,
        updated=account.updated,
        lastlogin=account.lastlogin,
        data=deserialize_data(account.data),
    )


def check_username(session: Session, username: str) -> bool:
    """True if an account with exactly this username exists."""
    return store.get_by_username(session, username) is not None


def login(
    session: Session,
    username_or_email: str,
    password: str,
    settings: "Settings | None" = None,
) -> LoginResult:
    """
    Check a password for a verified account matched by username or email.

    Unverified accounts are treated as missing. On success lastlogin is
    updated best effort; the result carries the previous lastlogin.
    """
    account = store.get_by_login(session, username_or_email, verified_only=True)
    if account is None:
        logger.debug("Login failed: no verified account for %r", username_or_email)
        raise NotFoundError("user does not exist")

    if not password_matches(
        account.username,
        password,
        account.salt,
        account.password_hash,
        _iterations(settings),
    ):
        logger.debug("Login failed: password mismatch for id=%s", account.id)
        raise AuthenticationError("password does not match")

    result = LoginResult(
        id=account.id,
        username=account.username,
        level=account.level,
        lastlogin=account.lastlogin,
    )
    try:
        store.update_account(session, account.id, {"lastlogin": _now()})
    except (SQLAlchemyError, CredstoreError) as e:
        session.rollback()
        logger.warning("Recording lastlogin failed for id=%s: %s", result.id, e)
    return result


def verify_account(session: Session, token: str) -> VerifiedAccount:
    """Consume a verification token: the account becomes verified and the token is cleared."""
    account = store.get_by_token(session, token) if token else None
    if account is None:
        raise NotFoundError("verification failed")

    result = VerifiedAccount(id=account.id, username=account.username, level=account.level)
    updated_count = store.update_account(
        session, account.id, {"verification_token": None, "verified": True}
    )
    if updated_count != 1:
        raise NotFoundError("verification failed")
    logger.info("Account verified: id=%s username=%s", result.id, result.username)
    return result


def _issue_token(
    session: Session,
    identifier: store.Identifier,
    unverify: bool,
) -> VerificationIssue:
    account = store.get_by_identifier(session, identifier)
    if account is None:
        raise NotFoundError("no such user")

    token = generate_verification_token()
    values: dict[str, Any] = {"verification_token": token}
    if unverify:
        values["verified"] = False
    issue = VerificationIssue(
        id=account.id,
        username=account.username,
        email=account.email,
        verification_token=token,
    )
    if store.update_account(session, account.id, values) != 1:
        raise NotFoundError("this user does not exist")
    return issue


def reset_verification(session: Session, identifier: store.Identifier) -> VerificationIssue:
    """
    Issue a new verification token and force the account back to unverified.

    The account cannot log in again until the new token is verified.
    """
    issue = _issue_token(session, identifier, unverify=True)
    logger.info("Verification reset: id=%s username=%s", issue.id, issue.username)
    return issue


def reissue_verification(session: Session, identifier: store.Identifier) -> VerificationIssue:
    """Issue a new verification token without touching the verified flag."""
    issue = _issue_token(session, identifier, unverify=False)
    logger.info("Verification token reissued: id=%s username=%s", issue.id, issue.username)
    return issue


def change_password(
    session: Session,
    username_or_email: str,
    credential: str,
    new_password: str,
    settings: "Settings | None" = None,
) -> AccountRef:
    """
    Set a new password, authorized by either the pending verification token or the current password.

    A token-authorized change consumes the token and leaves the account
    verified. A password-authorized change leaves the token as it was and
    marks the account unverified, even if it was verified before.
    """
    _validate_password(new_password)
    iterations = _iterations(settings)

    account = store.get_by_login(session, username_or_email)
    if account is None:
        raise NotFoundError("no such user")

    by_token = account.verification_token is not None and credential == account.verification_token
    if not by_token and not password_matches(
        account.username, credential, account.salt, account.password_hash, iterations
    ):
        raise AuthenticationError("password or verification does not match")

    salt = generate_salt()
    values: dict[str, Any] = {
        "password_hash": hash_password(account.username, new_password, salt, iterations),
        "salt": salt,
        "verified": by_token,
        "updated": _now(),
    }
    if by_token:
        values["verification_token"] = None
    ref = AccountRef.model_validate(account)
    if store.update_account(session, account.id, values) != 1:
        raise NotFoundError("changing password failed")
    logger.info(
        "Password changed: id=%s username=%s via=%s",
        ref.id,
        ref.username,
        "token" if by_token else "password",
    )
    return ref


def delete_account(session: Session, account_id: int) -> None:
    """Remove an account by id."""
    if store.delete_account(session, account_id) != 1:
        raise NotFoundError("this user did not exist")
    logger.info("Account deleted: id=%s", account_id)


def update_data(session: Session, identifier: store.Identifier, data: Any) -> AccountRef:
    """Replace the account's data blob and refresh its updated timestamp."""
    serialized = serialize_data(data)
    account = store.get_by_identifier(session, identifier)
    if account is None:
        raise NotFoundError("updating failed")

    ref = AccountRef.model_validate(account)
    if store.update_account(session, account.id, {"data": serialized, "updated": _now()}) != 1:
        raise NotFoundError("updating failed")
    return ref
