"""Main application entry point.

Run with ``uvicorn identity_core.main:app``.
"""

from identity_core.core.application import create_application
from identity_core.core.initialization import initialize_application

initialize_application()

app = create_application()
