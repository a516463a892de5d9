"""Store configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "sqlite+pysqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)

# PBKDF2 rounds below this are never used, whatever the configuration says.
MIN_HASH_ITERATIONS = 4096


class Settings(BaseSettings):
    """Validated store settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False

    # Embedded default: a SQLite file in the working directory
    DATABASE_URL: str = "sqlite:///./credstore.sqlite"

    # Hashing cost for PBKDF2-HMAC-SHA256
    HASH_ITERATIONS: int = MIN_HASH_ITERATIONS

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.strip().startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL (e.g. sqlite:///./credstore.sqlite)"
            )
        return v.strip()

    @field_validator("HASH_ITERATIONS")
    @classmethod
    def validate_hash_iterations(cls, v: int) -> int:
        if v < MIN_HASH_ITERATIONS:
            raise ValueError(
                f"HASH_ITERATIONS must be at least {MIN_HASH_ITERATIONS}"
            )
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


settings = get_settings()
