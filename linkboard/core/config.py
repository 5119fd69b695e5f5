"""Application configuration and settings management."""
from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from linkboard.core.security import SESSION_TOKEN_MAX_BYTES, SESSION_TOKEN_MIN_BYTES


class Settings(BaseSettings):
    """Global settings loaded from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=(Path(__file__).resolve().parent.parent / ".." / ".env"),
        env_file_encoding="utf-8",
        env_prefix="LINKBOARD_",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = "Linkboard"

    # Database
    database_url: str = "sqlite+aiosqlite:///./linkboard.db"
    database_echo: bool = False
    create_schema: bool = True

    # Security
    password_schemes: Annotated[List[str], NoDecode] = ["argon2"]
    session_token_bytes: int = 32

    # Listings
    listing_limit: int = 25
    hot_age_floor_seconds: float = 1.0

    log_level: str = "INFO"

    @field_validator("password_schemes", mode="before")
    @classmethod
    def _split_schemes(cls, value: List[str] | str) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("session_token_bytes")
    @classmethod
    def _enough_entropy(cls, value: int) -> int:
        if not SESSION_TOKEN_MIN_BYTES <= value <= SESSION_TOKEN_MAX_BYTES:
            raise ValueError(
                f"session_token_bytes must be between {SESSION_TOKEN_MIN_BYTES} and {SESSION_TOKEN_MAX_BYTES}"
            )
        return value

    @field_validator("hot_age_floor_seconds")
    @classmethod
    def _positive_floor(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("hot_age_floor_seconds must be positive")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()
