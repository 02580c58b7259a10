"""
Application-specific settings.
"""
from pydantic import Field
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings like project name, environment and logging.

    Performance Note:
        - API_WORKERS should be tuned based on server capacity; the orchestrator
          is stateless so workers scale horizontally without coordination.
    """
    PROJECT_NAME: str = "identity-core"
    VERSION: str = "0.1.0"
    APP_ENV: str = Field(default="development", pattern="^(development|test|staging|production)$")
    DEBUG: bool = False

    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_WORKERS: int = Field(ge=1, default=1)

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
