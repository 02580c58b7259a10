"""Application initialization and setup.

Tasks that must run once before the application object is created.
"""

from dotenv import load_dotenv

from identity_core.core.config.settings import settings
from identity_core.core.logging import configure_logging


def initialize_application() -> None:
    """Load environment variables and configure logging."""
    load_dotenv(override=False)
    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
