"""
Configuration management for the course service
"""
import logging
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ServerMisconfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Course service configuration loaded from environment variables"""

    # Server Configuration
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./courses.db"
    DB_ECHO: bool = False

    # Token signing
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Password hashing
    PASSWORD_HASH_SCHEME: str = "pbkdf2_sha256"
    PASSWORD_HASH_ROUNDS: Optional[int] = None

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    def require_signing_secret(self) -> str:
        """
        Return the token signing secret.

        Raises:
            ServerMisconfigurationError: If JWT_SECRET is unset or blank
        """
        if not self.JWT_SECRET or not self.JWT_SECRET.strip():
            logger.error("JWT_SECRET is not configured")
            raise ServerMisconfigurationError()
        return self.JWT_SECRET


@lru_cache
def get_settings() -> Settings:
    return Settings()
