"""Salt/token generation and the keyed PBKDF2 password hash."""

import hashlib
import json
import secrets

from credstore.core.config import MIN_HASH_ITERATIONS

# 16 random bytes -> 32 hex characters, for salts and verification tokens alike.
SALT_BYTES = 16
# PBKDF2 output length in bytes -> 64 hex characters.
HASH_BYTES = 32
HASH_ALGORITHM = "sha256"

PASSWORD_MIN_LEN = 8


def generate_salt() -> str:
    """Return a fresh random salt as a 32-character hex string."""
    return secrets.token_hex(SALT_BYTES)


def generate_verification_token() -> str:
    """Return a fresh unguessable verification token (same shape as a salt)."""
    return secrets.token_hex(SALT_BYTES)


def _credential_payload(username: str, password: str) -> bytes:
    # Compact JSON array, so the username is part of the derivation input.
    return json.dumps(
        [username, password], separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def hash_password(
    username: str,
    password: str,
    salt: str,
    iterations: int = MIN_HASH_ITERATIONS,
) -> str:
    """
    Derive the stored password hash for (username, password) with the account salt.

    PBKDF2-HMAC-SHA256 over the JSON-encoded pair; iterations below the floor
    are raised to MIN_HASH_ITERATIONS. Deterministic for identical inputs.
    """
    rounds = max(iterations, MIN_HASH_ITERATIONS)
    derived = hashlib.pbkdf2_hmac(
        HASH_ALGORITHM,
        _credential_payload(username, password),
        salt.encode("utf-8"),
        rounds,
        dklen=HASH_BYTES,
    )
    return derived.hex()


def password_matches(
    username: str,
    candidate: str,
    salt: str,
    stored_hash: str,
    iterations: int = MIN_HASH_ITERATIONS,
) -> bool:
    """Hash the candidate with the stored salt and compare against the stored hash."""
    return hash_password(username, candidate, salt, iterations) == stored_hash
