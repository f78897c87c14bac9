# formsafe/core/config.py
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings
import logging


class Settings(BaseSettings):
    """Basic library settings"""
    APP_NAME: str = "formsafe"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Session storage
    REDIS_URL: Optional[str] = Field(default=None)
    SESSION_KEY_PREFIX: str = "formsafe:session"
    SESSION_TTL_SECONDS: int = Field(default=1800, gt=0)
    SESSION_MAX_IN_MEMORY: int = Field(default=10000, gt=0)
    SESSION_LOCK_TIMEOUT: float = Field(default=5.0, gt=0)
    SESSION_COOKIE_NAME: str = "session_id"

    # CSRF
    CSRF_KEY_PREFIX: str = "csrf:"
    CSRF_NAME_BYTES: int = Field(default=16, ge=8)
    CSRF_TOKEN_BYTES: int = Field(default=32, ge=16)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }


# Settings singleton
settings = Settings()


def validate_required_settings() -> bool:
    """Check that optional backends are configured, warn if they are not"""
    missing = []

    if not settings.REDIS_URL:
        missing.append("REDIS_URL")

    if missing:
        logger = logging.getLogger(__name__)
        logger.warning(f"Missing environment variables: {', '.join(missing)}")
        logger.warning("Sessions fall back to in-memory storage (single process only).")
        return False

    return True
