"""
Settings for the Basketball Stats API.

Values come from the process environment first, then from an env file picked
by ENVIRONMENT: ``.env.<environment>`` when present, otherwise ``.env``.

Production refuses to start without a real DATABASE_URL and an NBA_API_KEY.
"""
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parents[2]

SQLITE_FALLBACK_URL = f"sqlite:///{PROJECT_ROOT / 'basketball_stats.db'}"

DEV_DASHBOARD_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

logger = logging.getLogger(__name__)


def pick_env_file(environment: Optional[str] = None) -> Path:
    """Return the env file for an environment name, falling back to ``.env``."""
    environment = environment or os.getenv("ENVIRONMENT", "development")
    specific = PROJECT_ROOT / f".env.{environment}"
    if specific.exists():
        return specific
    return PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=str(pick_env_file()),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    ENVIRONMENT: Literal["development", "production", "test"] = "development"

    APP_NAME: str = "Basketball Stats API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8001

    DATABASE_URL: str = SQLITE_FALLBACK_URL

    # balldontlie
    NBA_API_KEY: str = ""
    NBA_API_BASE_URL: str = "https://api.balldontlie.io/v1"
    NBA_API_TIMEOUT: float = 30.0
    NBA_SYNC_LOOKBACK_DAYS: int = 7

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE: Literal["memory", "redis"] = "memory"
    REDIS_URL: Optional[str] = None

    # Comma-separated; parsed by CORS_ORIGINS
    CORS_ORIGINS_STR: str = ""

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @property
    def CORS_ORIGINS(self) -> list[str]:
        configured = [origin.strip() for origin in self.CORS_ORIGINS_STR.split(",") if origin.strip()]
        if not self.is_production():
            return configured or list(DEV_DASHBOARD_ORIGINS)

        if not configured:
            logger.warning("No CORS origins configured for production; cross-origin requests are refused")
            return []
        if "*" in configured:
            logger.warning("Ignoring wildcard CORS origin in production")
            return []
        return configured

    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    def validate_required_secrets(self) -> list[str]:
        """Names of settings that must be set for this environment but are not."""
        missing = []
        if self.is_production():
            if self.DATABASE_URL == SQLITE_FALLBACK_URL:
                missing.append("DATABASE_URL")
            if not self.NBA_API_KEY:
                missing.append("NBA_API_KEY")
        if self.RATE_LIMIT_ENABLED and self.RATE_LIMIT_STORAGE == "redis" and not self.REDIS_URL:
            missing.append("REDIS_URL")
        return missing


settings = Settings()

_missing = settings.validate_required_secrets()
if _missing:
    logger.warning(f"Settings missing for {settings.ENVIRONMENT}: {', '.join(_missing)}")
    if settings.is_production():
        raise ValueError(f"Refusing to start in production without: {', '.join(_missing)}")
