from unittest.mock import AsyncMock

import httpx
import pytest_asyncio

from identity_core.core.application import create_application
from identity_core.domain.interfaces import IAuthenticationOrchestrator
from identity_core.infrastructure.dependency_injection.auth_dependencies import (
    get_authentication_orchestrator,
)


@pytest_asyncio.fixture
async def app():
    return create_application(with_lifespan=False)


@pytest_asyncio.fixture
async def orchestrator(app):
    """Provides a mocked orchestrator wired in place of the real one."""
    mock_orchestrator = AsyncMock(spec=IAuthenticationOrchestrator)
    app.dependency_overrides[get_authentication_orchestrator] = lambda: mock_orchestrator
    yield mock_orchestrator
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def async_client(app, orchestrator):
    """Provides an async test client."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
