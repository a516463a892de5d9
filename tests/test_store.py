"""Tests for credstore.services.store against an in-memory SQLite database."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from credstore.core.database import init_db
from credstore.core.exceptions import ConflictError, ValidationError
from credstore.services import store


def _session() -> Session:
    """Fresh in-memory database with the users table."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def _values(username: str = "alice", email: str = "alice@example.com", **kwargs: object) -> dict:
    """Minimal column values for a users row."""
    values = {
        "username": username,
        "email": email,
        "password_hash": "0" * 64,
        "salt": "1" * 32,
        "verification_token": None,
        "verified": True,
        "level": 0,
        "created": 1700000000,
        "updated": 1700000000,
        "lastlogin": None,
        "data": "{}",
    }
    values.update(kwargs)
    return values


class TestInsertAndGet(unittest.TestCase):
    def setUp(self) -> None:
        self.session = _session()

    def tearDown(self) -> None:
        self.session.close()

    def test_insert_assigns_id(self) -> None:
        account = store.insert_account(self.session, _values())
        self.assertIsInstance(account.id, int)
        self.assertEqual(store.get_by_id(self.session, account.id).username, "alice")

    def test_identifier_dispatch(self) -> None:
        account = store.insert_account(self.session, _values())
        self.assertEqual(store.get_by_identifier(self.session, account.id).id, account.id)
        self.assertEqual(store.get_by_identifier(self.session, "alice").id, account.id)
        self.assertIsNone(store.get_by_identifier(self.session, "nobody"))

    def test_identifier_of_wrong_type_is_rejected(self) -> None:
        for bad in (True, 1.5, None, b"alice"):
            with self.assertRaises(ValidationError):
                store.get_by_identifier(self.session, bad)  # type: ignore[arg-type]

    def test_duplicate_username_is_conflict(self) -> None:
        store.insert_account(self.session, _values())
        with self.assertRaises(ConflictError):
            store.insert_account(self.session, _values(email="other@example.com"))
        # Session is usable after the rollback.
        self.assertIsNotNone(store.get_by_username(self.session, "alice"))

    def test_duplicate_email_is_conflict(self) -> None:
        store.insert_account(self.session, _values())
        with self.assertRaises(ConflictError):
            store.insert_account(self.session, _values(username="alice2"))


class TestLoginLookup(unittest.TestCase):
    def setUp(self) -> None:
        self.session = _session()
        store.insert_account(self.session, _values())
        store.insert_account(
            self.session,
            _values(username="bob", email="bob@example.com", verified=False, verification_token="t" * 32),
        )

    def tearDown(self) -> None:
        self.session.close()

    def test_matches_username_or_email(self) -> None:
        self.assertEqual(store.get_by_login(self.session, "alice").username, "alice")
        self.assertEqual(store.get_by_login(self.session, "alice@example.com").username, "alice")

    def test_verified_only_skips_unverified(self) -> None:
        self.assertIsNotNone(store.get_by_login(self.session, "bob"))
        self.assertIsNone(store.get_by_login(self.session, "bob", verified_only=True))

    def test_get_by_token(self) -> None:
        self.assertEqual(store.get_by_token(self.session, "t" * 32).username, "bob")
        self.assertIsNone(store.get_by_token(self.session, "missing"))


class TestUpdateAndDelete(unittest.TestCase):
    def setUp(self) -> None:
        self.session = _session()
        self.account_id = store.insert_account(self.session, _values()).id

    def tearDown(self) -> None:
        self.session.close()

    def test_update_returns_affected_rows(self) -> None:
        self.assertEqual(store.update_account(self.session, self.account_id, {"level": 3}), 1)
        self.assertEqual(store.get_by_id(self.session, self.account_id).level, 3)
        self.assertEqual(store.update_account(self.session, 9999, {"level": 3}), 0)

    def test_update_to_duplicate_token_is_conflict(self) -> None:
        other = store.insert_account(
            self.session, _values(username="carol", email="carol@example.com", verification_token="x" * 32)
        )
        with self.assertRaises(ConflictError):
            store.update_account(self.session, self.account_id, {"verification_token": "x" * 32})
        self.assertEqual(store.get_by_id(self.session, other.id).verification_token, "x" * 32)

    def test_delete_returns_affected_rows(self) -> None:
        self.assertEqual(store.delete_account(self.session, self.account_id), 1)
        self.assertIsNone(store.get_by_id(self.session, self.account_id))
        self.assertEqual(store.delete_account(self.session, self.account_id), 0)


class TestStoreErrorsRollBack(unittest.TestCase):
    """A failing commit rolls the session back and re-raises the store error."""

    def _failing_session(self) -> MagicMock:
        session = MagicMock()
        session.commit.side_effect = OperationalError("COMMIT", {}, Exception("database is locked"))
        return session

    def test_update_rolls_back(self) -> None:
        session = self._failing_session()
        with self.assertRaises(OperationalError):
            store.update_account(session, 1, {"level": 2})
        session.rollback.assert_called_once()

    def test_delete_rolls_back(self) -> None:
        session = self._failing_session()
        with self.assertRaises(OperationalError):
            store.delete_account(session, 1)
        session.rollback.assert_called_once()

    def test_insert_rolls_back(self) -> None:
        session = self._failing_session()
        with self.assertRaises(OperationalError):
            store.insert_account(session, _values())
        session.rollback.assert_called_once()
        session.refresh.assert_not_called()


if __name__ == "__main__":
    unittest.main()
