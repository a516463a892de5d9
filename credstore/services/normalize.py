"""Normalize account input (usernames, emails, levels) and (de)serialize the data blob."""

import json
import math
import re
from typing import Any

from text_unidecode import unidecode

from credstore.core.exceptions import SerializationError

USERNAME_SEPARATOR = "_"

# Final shape of a stored username.
_USERNAME_PATTERN = re.compile(r"^[a-z0-9_.-]+$")
# Runs of anything else (whitespace and punctuation included) become the separator.
_DISALLOWED = re.compile(r"[^a-z0-9.-]+")
_REPEATED_SEPARATOR = re.compile(r"_{2,}")

# Signed 32-bit range for level.
_INT32_MOD = 2**32
_INT32_MAX = 2**31 - 1

DEFAULT_DATA = "{}"


def slugify_username(value: str) -> str:
    """
    Lowercase and slugify free-form text into a username.

    Non-ASCII letters are transliterated, runs of characters outside
    [a-z0-9.-] become the separator, repeated separators collapse and leading
    or trailing separators are stripped. May return an empty string.
    """
    slug = unidecode(value).lower()
    slug = _DISALLOWED.sub(USERNAME_SEPARATOR, slug)
    slug = _REPEATED_SEPARATOR.sub(USERNAME_SEPARATOR, slug)
    return slug.strip(USERNAME_SEPARATOR)


def is_valid_username(username: str) -> bool:
    """True if username is non-empty and only uses [a-z0-9_.-]."""
    return bool(username) and _USERNAME_PATTERN.fullmatch(username) is not None


def normalize_email(email: str) -> str:
    return email.lower()


def coerce_level(level: Any) -> int:
    """
    Coerce a caller-supplied level to a signed 32-bit integer.

    Non-numbers (and booleans) become 0; floats are truncated toward zero;
    values outside the int32 range wrap around.
    """
    if isinstance(level, bool) or not isinstance(level, (int, float)):
        return 0
    if isinstance(level, float) and not math.isfinite(level):
        return 0
    wrapped = int(level) % _INT32_MOD
    if wrapped > _INT32_MAX:
        wrapped -= _INT32_MOD
    return wrapped


def serialize_data(data: Any) -> str:
    """Encode the caller's data blob as JSON text for storage."""
    try:
        return json.dumps(data)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"data is not serializable: {e}", cause=e) from e


def deserialize_data(raw: str | bytes | None) -> Any:
    """Decode a stored data blob. A missing blob reads as an empty object."""
    if raw is None:
        return {}
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"stored data is corrupt: {e}", cause=e) from e
