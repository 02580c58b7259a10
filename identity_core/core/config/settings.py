"""Main application settings and configuration management.

This module composes the settings from the different modules (app, database,
redis, auth, email) into a single `Settings` class, loads them from
environment variables and .env files, validates them, and exposes a single
`settings` object for use throughout the application.

Environment Support:
- Development: Uses .env, email test mode enabled
- Test: Uses .env.test, email test mode enabled
- Staging: Uses .env.staging, secrets and SMTP credentials required
- Production: Uses .env.production, secrets and SMTP credentials required
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import DEVELOPMENT_SIGNING_KEY, AuthSettings
from .database import DatabaseSettings
from .email import EmailSettings
from .redis import RedisSettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)

STRICT_ENVIRONMENTS = ("staging", "production")


class Settings(AppSettings, DatabaseSettings, RedisSettings, AuthSettings, EmailSettings):
    """The main settings class that aggregates all application configurations.

    Security Note:
        - Ensure all sensitive fields (signing keys, passwords) are securely
          stored and never logged or exposed.
        - Staging and production refuse to start with development secrets.
    Usage:
        - Access settings via the singleton instance `settings`.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        """Initialize settings with environment-specific configuration."""
        super().__init__(**kwargs)
        self._set_environment_defaults(self.APP_ENV)

    def _set_environment_defaults(self, env: str) -> None:
        """Set environment-specific default values.

        Args:
            env: Environment name
        """
        if env in ("development", "test"):
            self.EMAIL_TEST_MODE = True

        if env == "development":
            self.DEBUG = True

        logger.info(
            "Application running in %s environment (email test mode: %s, debug: %s)",
            env,
            self.EMAIL_TEST_MODE,
            self.DEBUG,
        )

    def validate_required_fields(self) -> None:
        """Validates that production secrets are present and not left at defaults.

        Raises:
            ValueError: If a strict environment is configured with missing or
                development-only secrets.
        """
        problems = []
        if self.JWT_SIGNING_KEY.get_secret_value() == DEVELOPMENT_SIGNING_KEY:
            problems.append("JWT_SIGNING_KEY")
        if self.JWT_ALGORITHM.startswith("HS") and len(self.JWT_SIGNING_KEY.get_secret_value()) < 32:
            problems.append("JWT_SIGNING_KEY (minimum 32 characters)")
        if not self.REDIS_PASSWORD.get_secret_value():
            problems.append("REDIS_PASSWORD")
        if self.EMAIL_CONFIRMATION_URL_BASE.startswith("http://localhost"):
            problems.append("EMAIL_CONFIRMATION_URL_BASE")

        if problems:
            error_msg = f"Missing or insecure configuration: {', '.join(problems)}"
            if self.APP_ENV in STRICT_ENVIRONMENTS:
                logger.error(error_msg)
                raise ValueError(error_msg)
            logger.warning("%s environment: %s", self.APP_ENV, error_msg)

        self.validate_smtp_config()


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production",
    }
    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info("Loading environment configuration from %s", env_file)
        return Settings(_env_file=env_file)
    if Path(".env").exists():
        logger.info("Loading environment configuration from .env (environment: %s)", env)
        return Settings()
    logger.warning("No .env file found, using environment variables only (environment: %s)", env)
    return Settings(_env_file=None)


# Create a singleton instance of the settings to be used across the application.
settings = create_settings()
settings.validate_required_fields()
