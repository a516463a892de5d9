"""Unit tests for credstore.core.security: salts, tokens and the keyed PBKDF2 hash."""

import hashlib
import re
import unittest

from credstore.core.config import MIN_HASH_ITERATIONS
from credstore.core.security import (
    generate_salt,
    generate_verification_token,
    hash_password,
    password_matches,
)

_HEX32 = re.compile(r"^[0-9a-f]{32}$")
_HEX64 = re.compile(r"^[0-9a-f]{64}$")


class TestSaltAndToken(unittest.TestCase):
    """Salts and tokens are 32 lowercase hex characters and do not repeat."""

    def test_salt_shape(self) -> None:
        self.assertRegex(generate_salt(), _HEX32)

    def test_token_shape(self) -> None:
        self.assertRegex(generate_verification_token(), _HEX32)

    def test_salts_are_fresh(self) -> None:
        salts = {generate_salt() for _ in range(50)}
        self.assertEqual(len(salts), 50)


class TestHashPassword(unittest.TestCase):
    """hash_password is deterministic and binds username, password and salt."""

    def test_output_is_64_hex_chars(self) -> None:
        self.assertRegex(hash_password("alice", "secret123", "00" * 16), _HEX64)

    def test_deterministic(self) -> None:
        salt = generate_salt()
        self.assertEqual(
            hash_password("alice", "secret123", salt),
            hash_password("alice", "secret123", salt),
        )

    def test_matches_pbkdf2_over_compact_json_pair(self) -> None:
        salt = "ab" * 16
        expected = hashlib.pbkdf2_hmac(
            "sha256", b'["alice","secret123"]', salt.encode("utf-8"), 4096, dklen=32
        ).hex()
        self.assertEqual(hash_password("alice", "secret123", salt), expected)

    def test_each_argument_changes_output(self) -> None:
        base = hash_password("alice", "secret123", "salt-a")
        self.assertNotEqual(base, hash_password("bob", "secret123", "salt-a"))
        self.assertNotEqual(base, hash_password("alice", "secret124", "salt-a"))
        self.assertNotEqual(base, hash_password("alice", "secret123", "salt-b"))

    def test_same_password_different_users_differ_with_same_salt(self) -> None:
        self.assertNotEqual(
            hash_password("alice", "hunter22", "s"),
            hash_password("bob", "hunter22", "s"),
        )

    def test_iterations_below_floor_are_raised(self) -> None:
        self.assertEqual(
            hash_password("alice", "secret123", "s", iterations=1),
            hash_password("alice", "secret123", "s", iterations=MIN_HASH_ITERATIONS),
        )

    def test_higher_iterations_change_output(self) -> None:
        self.assertNotEqual(
            hash_password("alice", "secret123", "s", iterations=MIN_HASH_ITERATIONS),
            hash_password("alice", "secret123", "s", iterations=MIN_HASH_ITERATIONS + 1),
        )

    def test_non_ascii_password(self) -> None:
        salt = "cd" * 16
        expected = hashlib.pbkdf2_hmac(
            "sha256", '["jurgen","grüße123"]'.encode("utf-8"), salt.encode("utf-8"), 4096, dklen=32
        ).hex()
        self.assertEqual(hash_password("jurgen", "grüße123", salt), expected)


class TestPasswordMatches(unittest.TestCase):
    def test_correct_and_wrong_candidate(self) -> None:
        salt = generate_salt()
        stored = hash_password("alice", "secret123", salt)
        self.assertTrue(password_matches("alice", "secret123", salt, stored))
        self.assertFalse(password_matches("alice", "wrong-pass", salt, stored))
        self.assertFalse(password_matches("mallory", "secret123", salt, stored))


if __name__ == "__main__":
    unittest.main()
