"""Key-indexed record access for accounts: the only module that queries the users table."""

from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from credstore.core.exceptions import ConflictError, ValidationError
from credstore.models import Account

# Account identifier accepted by get/reset/reissue/data: numeric id or username.
Identifier = int | str


def insert_account(session: Session, values: dict[str, Any]) -> Account:
    """
    Insert a new account and commit; returns it with its store-assigned id.
    Raises ConflictError (after rollback) on a uniqueness violation.
    """
    account = Account(**values)
    session.add(account)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise ConflictError(f"account already exists: {e.orig}", cause=e) from e
    except SQLAlchemyError:
        session.rollback()
        raise
    session.refresh(account)
    return account


def get_by_id(session: Session, account_id: int) -> Account | None:
    return session.query(Account).filter(Account.id == account_id).first()


def get_by_username(session: Session, username: str) -> Account | None:
    return session.query(Account).filter(Account.username == username).first()


def get_by_identifier(session: Session, identifier: Identifier) -> Account | None:
    """Resolve an id-or-username identifier into a single lookup."""
    # bool is an int subclass but never a valid id.
    if isinstance(identifier, int) and not isinstance(identifier, bool):
        return get_by_id(session, identifier)
    if isinstance(identifier, str):
        return get_by_username(session, identifier)
    raise ValidationError("first argument must be username or id")


def get_by_login(
    session: Session,
    username_or_email: str,
    verified_only: bool = False,
) -> Account | None:
    """Look up an account whose username or email equals the given string."""
    query = session.query(Account).filter(
        or_(Account.username == username_or_email, Account.email == username_or_email)
    )
    if verified_only:
        query = query.filter(Account.verified.is_(True))
    return query.first()


def get_by_token(session: Session, token: str) -> Account | None:
    return session.query(Account).filter(Account.verification_token == token).first()


def update_account(session: Session, account_id: int, values: dict[str, Any]) -> int:
    """
    Update columns of one account by id and commit. Returns the affected row count.
    Raises ConflictError (after rollback) on a uniqueness violation.
    """
    try:
        updated_count = (
            session.query(Account)
            .filter(Account.id == account_id)
            .update(values, synchronize_session=False)
        )
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise ConflictError(f"update rejected by the store: {e.orig}", cause=e) from e
    except SQLAlchemyError:
        session.rollback()
        raise
    return updated_count


def delete_account(session: Session, account_id: int) -> int:
    """Delete one account by id and commit. Returns the affected row count."""
    try:
        deleted_count = (
            session.query(Account)
            .filter(Account.id == account_id)
            .delete(synchronize_session=False)
        )
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise
    return deleted_count
