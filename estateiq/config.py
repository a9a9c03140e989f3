"""
Configuration for the EstateIQ application.

Settings are read from the environment (and an optional ``.env`` file next to
the project root). Only ``DATABASE_URL`` matters for authentication and the
ROE calculator; the rest tune logging, cookies and Google sign-in.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Fixed session policy
SESSION_DURATION_DAYS = 7
SESSION_COOKIE_NAME = "session_token"
SESSION_COOKIE_MAX_AGE = SESSION_DURATION_DAYS * 24 * 60 * 60

# Credential policy
MIN_PASSWORD_LENGTH = 8
BCRYPT_ROUNDS = 12


PROJECT_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    # Unknown env vars are ignored so unrelated keys don't break startup
    model_config = SettingsConfigDict(env_file=PROJECT_DIR / ".env", extra="ignore")

    # Application settings
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = str(PROJECT_DIR / "logs")

    # Database
    DATABASE_URL: str = "sqlite:///./estateiq.db"
    SQL_ECHO: bool = False

    # Google sign-in. When unset, identity tokens are decoded without
    # signature verification.
    GOOGLE_CLIENT_ID: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "production"


settings = Settings()
