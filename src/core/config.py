# src/core/config.py
import logging
from typing import List, Literal, Optional
from pydantic import Field
from pydantic_settings import BaseSettings

from src.models.session_state import CookieOptions

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application and session cookie settings"""
    APP_NAME: str = "JWT Session Service"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = "logs"
    LOG_MAX_BYTES: int = 5 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    # Session token settings
    SESSION_COOKIE_NAME: str = "session"
    SESSION_SECRETS: List[str] = Field(default_factory=list)
    SESSION_MAX_AGE: Optional[int] = None
    SESSION_ENCRYPT: bool = False
    SESSION_SIGN: bool = True
    SESSION_STRICT_SECURITY: bool = False

    # Cookie attributes
    COOKIE_DOMAIN: Optional[str] = None
    COOKIE_PATH: str = "/"
    COOKIE_SECURE: bool = True
    COOKIE_HTTPONLY: bool = True
    COOKIE_SAMESITE: Optional[Literal["lax", "strict", "none"]] = "lax"

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_TIER: Literal["default", "trusted"] = "default"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }


# Settings singleton
settings = Settings()


def build_cookie_options(config: Optional[Settings] = None) -> CookieOptions:
    """Translate settings into session cookie options"""
    config = config or settings
    return CookieOptions(
        name=config.SESSION_COOKIE_NAME,
        domain=config.COOKIE_DOMAIN,
        path=config.COOKIE_PATH,
        max_age=config.SESSION_MAX_AGE,
        secure=config.COOKIE_SECURE,
        http_only=config.COOKIE_HTTPONLY,
        same_site=config.COOKIE_SAMESITE,
        secrets=config.SESSION_SECRETS,
    )


def validate_required_settings(config: Optional[Settings] = None) -> bool:
    """Check that session security settings are usable"""
    config = config or settings
    missing = []

    if not config.SESSION_SECRETS:
        missing.append("SESSION_SECRETS")

    if missing:
        logger.warning(f"Missing environment variables: {', '.join(missing)}")
        if config.SESSION_ENCRYPT or config.SESSION_SIGN:
            logger.warning("Encryption/signing requested without a secret - tokens will not be protected.")
        return False

    return True
