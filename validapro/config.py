from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "ValidaPro"
    ENVIRONMENT: str = "local"
    CORS_ORIGINS: str = "*"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./validapro.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Security
    # ==============================
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 480
    PASSWORD_PBKDF2_ROUNDS: int = 200_000
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: Optional[str] = "admin123"

    # ==============================
    # Stock alerts
    # ==============================
    LOW_STOCK_THRESHOLD: int = 15
    EXPIRING_SOON_DAYS: int = 10

    # ==============================
    # Activity feed
    # ==============================
    ACTIVITY_FEED_LIMIT: int = 10


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
