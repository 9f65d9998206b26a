"""
Configuration management for the auth service
"""
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class Settings(BaseSettings):
    """Auth service configuration loaded from environment variables"""

    # Token signing. An empty secret is treated as "unavailable": logins fail
    # with SigningError until one is configured.
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60, gt=0)

    # Password hashing (pbkdf2_sha256 rounds)
    PASSWORD_HASH_ROUNDS: int = Field(default=29000, ge=1000)

    # User storage
    USER_STORE: Literal["memory", "sql"] = "memory"
    DATABASE_URL: str = "sqlite:///./auth.db"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        """Only shared-secret HMAC algorithms make sense for a server-held secret"""
        if v not in HMAC_ALGORITHMS:
            raise ValueError(f"JWT_ALGORITHM must be one of: {', '.join(HMAC_ALGORITHMS)}")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
